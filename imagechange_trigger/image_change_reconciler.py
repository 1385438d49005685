"""Update deployment configs whose image change triggers follow a changed image stream"""

import logging
from dataclasses import dataclass
from typing import Optional

from .exceptions import DeepCopyError, ListConfigsError, UpdatesFailedError
from .image_stream_tags import split_image_stream_tag
from .models import IMAGE_CHANGE_TRIGGER, DeploymentConfig, ImageStream
from .protocols import ConfigCopier, ConfigLister, ConfigUpdater
from .trigger_matcher import trigger_matches_image

logger = logging.getLogger(__name__)


def deep_copy_config(config: DeploymentConfig) -> DeploymentConfig:
    """
    Copy a deployment config so it can be mutated without affecting the original
    :param config: config to copy
    :return: independent deep copy of the config
    :raises DeepCopyError: if the config could not be copied
    """
    try:
        return config.model_copy(deep=True)
    except Exception as ex:
        raise DeepCopyError(f"Couldn't copy deployment config {config.label}") from ex


def detect_image_changes(
    config: DeploymentConfig,
    stream: ImageStream,
    copier: ConfigCopier = deep_copy_config,
) -> Optional[DeploymentConfig]:
    """
    Resolve the images of every trigger of a config which follows the stream.
    The config is copied once, before its first mutation, and only the copy is
    mutated.

    :param config: config to inspect
    :param stream: the changed image stream
    :param copier: used to copy the config prior to mutation
    :return: the mutated copy, None if no trigger fired
    :raises DeepCopyError: if the config could not be copied
    """
    # pylint: disable=consider-using-enumerate
    logger.debug("Detecting image changes for deployment config %s", config.label)
    changed = False

    for index in range(len(config.spec.triggers)):
        # config may be replaced by its copy, always read from it
        trigger = config.spec.triggers[index]
        params = trigger.image_change_params
        if trigger.type != IMAGE_CHANGE_TRIGGER or params is None:
            continue

        # Initial deployments always resolve their images, later ones only when
        # automatic and not paused
        if (not params.automatic or config.spec.paused) and params.last_triggered_image:
            continue

        # only triggers in the namespace of the stream can follow it
        if (params.from_.namespace or config.namespace) != stream.namespace:
            continue

        _, tag, ok = split_image_stream_tag(params.from_.name)
        if not ok:
            logger.warning(
                "Invalid image stream tag %r in %s", params.from_.name, config.label
            )
            continue

        if not trigger_matches_image(config, params, stream):
            continue

        latest_event = stream.latest_tagged_image(tag)
        if latest_event is None:
            logger.debug(
                "Couldn't find latest tag event for tag %r in image stream %s",
                tag,
                stream.label,
            )
            continue

        latest_image = latest_event.docker_image_reference
        if not latest_image or latest_image == params.last_triggered_image:
            logger.debug(
                "No image changes for deployment config %s were detected",
                config.label,
            )
            continue

        names = set(params.container_names)
        for position in range(len(config.spec.template.spec.containers)):
            if config.spec.template.spec.containers[position].name not in names:
                continue

            if not changed:
                config = copier(config)
                params = config.spec.triggers[index].image_change_params
                assert params is not None

            config.spec.template.spec.containers[position].image = latest_image
            params.last_triggered_image = latest_image
            changed = True

    return config if changed else None


@dataclass(frozen=True)
class ImageChangeReconciler:
    """
    Keep deployment configs in sync with the image streams their image change
    triggers follow. Holds no state between calls, every call lists the configs
    from the store.

    :param lister: an object to list all known deployment configs
    :param updater: an object to replace a deployment config in the store
    :param copier: an object to copy a config before it is mutated
    """

    lister: ConfigLister
    updater: ConfigUpdater
    copier: ConfigCopier = deep_copy_config

    def __call__(self, stream: ImageStream) -> int:
        """
        Update every deployment config with a trigger fired by the stream.

        :param stream: the image stream, as observed after its change
        :raises ListConfigsError: if the configs could not be listed, nothing
                                  is updated in that case
        :raises UpdatesFailedError: if some configs could not be copied or updated,
                                    after all other configs were updated
        :return: number of configs submitted for update
        """
        try:
            configs = self.lister()
        except Exception as ex:
            raise ListConfigsError(
                "Couldn't get list of deployment configs while handling image "
                f"stream {stream.label}: {ex}"
            ) from ex

        failures: dict[str, Exception] = {}
        configs_to_update: list[DeploymentConfig] = []
        for config in configs:
            try:
                updated = detect_image_changes(config, stream, self.copier)
            except DeepCopyError as ex:
                logger.error("Skipping deployment config %s: %s", config.label, ex)
                failures[config.label] = ex
                continue
            if updated is not None:
                configs_to_update.append(updated)

        for config in configs_to_update:
            try:
                self.updater(config)
            except Exception as ex:  # pylint: disable=broad-exception-caught
                logger.warning(
                    "Couldn't update deployment config %s: %s", config.label, ex
                )
                failures[config.label] = ex

        if failures:
            raise UpdatesFailedError(stream.label, len(configs_to_update), failures)

        logger.info(
            "Updated %d deployment configs for trigger on image stream %s",
            len(configs_to_update),
            stream.label,
        )
        return len(configs_to_update)
