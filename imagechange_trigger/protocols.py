"""image change reconciler protocols"""

from typing import Protocol

from .models import DeploymentConfig

# pylint: disable=too-few-public-methods


class ConfigLister(Protocol):
    """
    Return every known deployment config
    """

    def __call__(self) -> list[DeploymentConfig]:
        pass


class ConfigUpdater(Protocol):
    """
    Replace a stored deployment config, keyed by its namespace and name.
    Stale resource versions are rejected by the store.
    """

    def __call__(self, config: DeploymentConfig) -> DeploymentConfig:
        pass


class ConfigCopier(Protocol):
    """
    Return an independent deep copy of a deployment config
    """

    def __call__(self, config: DeploymentConfig) -> DeploymentConfig:
        pass
