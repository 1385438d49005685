#!/usr/bin/env python3

"""Update the deployment configs triggered by an image stream"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from kubernetes import client, config  # type: ignore

from .exceptions import ListConfigsError, UpdatesFailedError
from .image_change_reconciler import ImageChangeReconciler
from .kube_store import DeploymentConfigStore, get_image_stream, load_config
from .models import ImageStream


def configure_logging(level: str) -> None:
    """Initialise the root logger with a terse format"""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def read_image_stream(
    image_stream_yaml: Optional[Path], namespace: Optional[str], name: Optional[str]
) -> ImageStream:
    """
    Read the image stream from a manifest file or from the cluster
    :param image_stream_yaml: path to an ImageStream manifest
    :param namespace: namespace of the image stream in the cluster
    :param name: name of the image stream in the cluster
    :return: the image stream
    """
    if image_stream_yaml is not None:
        try:
            obj: dict = yaml.safe_load(image_stream_yaml.read_text())
        except FileNotFoundError as ex:
            raise FileNotFoundError(
                f"Could not find image stream file at {image_stream_yaml.resolve()}"
            ) from ex
        return ImageStream.from_api(obj)

    if not namespace or not name:
        raise click.UsageError(
            "Either --image-stream-yaml or both --namespace and --name are required"
        )
    return get_image_stream(
        client.CustomObjectsApi().get_namespaced_custom_object, namespace, name
    )


@click.command()
@click.option(
    "--namespace",
    help="Namespace of the image stream",
    type=click.STRING,
    envvar="IMAGE_STREAM_NAMESPACE",
)
@click.option(
    "--name",
    help="Name of the image stream",
    type=click.STRING,
    envvar="IMAGE_STREAM_NAME",
)
@click.option(
    "--image-stream-yaml",
    help="Path to an ImageStream manifest, used instead of reading it from the cluster",
    type=click.Path(path_type=Path),
)
@click.option(
    "--config-namespace",
    help="Only update deployment configs of this namespace",
    type=click.STRING,
    envvar="CONFIG_NAMESPACE",
)
@click.option(
    "--log-level",
    help="Logging level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="info",
    envvar="LOG_LEVEL",
)
def main(
    namespace: Optional[str],
    name: Optional[str],
    image_stream_yaml: Optional[Path],
    config_namespace: Optional[str],
    log_level: str,
) -> None:
    """Update the deployment configs whose image change triggers follow a stream"""
    configure_logging(log_level)
    load_config(config)

    stream = read_image_stream(image_stream_yaml, namespace, name)
    store = DeploymentConfigStore(
        api=client.CustomObjectsApi(), namespace=config_namespace
    )
    reconciler = ImageChangeReconciler(
        lister=store.list_deployment_configs,
        updater=store.update_deployment_config,
    )

    try:
        updated = reconciler(stream)
    except (ListConfigsError, UpdatesFailedError) as ex:
        sys.exit(str(ex))

    print(f"Updated {updated} deployment configs for image stream {stream.label}")


if __name__ == "__main__":
    main()  # pylint: disable=no-value-for-parameter
