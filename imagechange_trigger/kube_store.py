"""Read and replace OpenShift objects through the Kubernetes API"""

from dataclasses import dataclass
from types import ModuleType
from typing import Callable, Optional

from kubernetes import client  # type: ignore
from urllib3.exceptions import HTTPError

from .exceptions import UpdateConfigError
from .models import DeploymentConfig, ImageStream

DC_GROUP = "apps.openshift.io"
DC_VERSION = "v1"
DC_PLURAL = "deploymentconfigs"

IS_GROUP = "image.openshift.io"
IS_VERSION = "v1"
IS_PLURAL = "imagestreams"


def load_config(conf: ModuleType) -> None:
    """Load configs from cluster or pod"""
    try:
        conf.load_incluster_config()
    except conf.ConfigException:
        conf.load_kube_config()


def get_image_stream(getter: Callable, namespace: str, name: str) -> ImageStream:
    """
    Get an image stream from the cluster
    :param getter: CustomObjectsApi.get_namespaced_custom_object
    :param namespace: namespace of the image stream
    :param name: name of the image stream
    :return: the image stream with its tag histories
    """
    obj = getter(
        group=IS_GROUP,
        version=IS_VERSION,
        namespace=namespace,
        plural=IS_PLURAL,
        name=name,
    )
    return ImageStream.from_api(obj)


@dataclass(frozen=True)
class DeploymentConfigStore:
    """
    List and replace deployment configs stored in the cluster

    :param api: custom objects API client
    :param namespace: only list configs of this namespace, all namespaces if unset
    """

    api: client.CustomObjectsApi
    namespace: Optional[str] = None

    def list_deployment_configs(self) -> list[DeploymentConfig]:
        """List deployment configs"""
        if self.namespace:
            objs = self.api.list_namespaced_custom_object(
                group=DC_GROUP,
                version=DC_VERSION,
                namespace=self.namespace,
                plural=DC_PLURAL,
            )
        else:
            objs = self.api.list_cluster_custom_object(
                group=DC_GROUP,
                version=DC_VERSION,
                plural=DC_PLURAL,
            )
        return [DeploymentConfig.model_validate(item) for item in objs["items"]]

    def update_deployment_config(self, config: DeploymentConfig) -> DeploymentConfig:
        """
        Replace a deployment config. The resource version carried by the config
        makes the API server reject the update if the config changed meanwhile.

        :param config: the full replacement config
        :raises UpdateConfigError: if the API server rejected the update or could
                                   not be reached
        :return: the config as stored
        """
        try:
            obj = self.api.replace_namespaced_custom_object(
                group=DC_GROUP,
                version=DC_VERSION,
                namespace=config.namespace,
                plural=DC_PLURAL,
                name=config.name,
                body=config.to_api(),
            )
        except client.ApiException as ex:
            raise UpdateConfigError(
                f"Failed replacing deployment config {config.label}: "
                f"{ex.status} {ex.reason}"
            ) from ex
        except HTTPError as ex:
            raise UpdateConfigError(
                f"Failed replacing deployment config {config.label}: {ex}"
            ) from ex
        return DeploymentConfig.model_validate(obj)
