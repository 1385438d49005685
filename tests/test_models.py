"""Test models.py"""

from typing import Optional

import pytest
from pydantic import ValidationError

from imagechange_trigger.models import DeploymentConfig, ImageStream, TagEvent

API_IMAGE_STREAM = {
    "apiVersion": "image.openshift.io/v1",
    "kind": "ImageStream",
    "metadata": {"name": "app", "namespace": "ns"},
    "status": {
        "tags": [
            {
                "tag": "latest",
                "items": [
                    {
                        "created": "2024-03-18T15:00:00Z",
                        "dockerImageReference": "registry/app@sha256:NEW",
                        "image": "sha256:NEW",
                    },
                    {
                        "created": "2024-03-17T15:00:00Z",
                        "dockerImageReference": "registry/app@sha256:OLD",
                        "image": "sha256:OLD",
                    },
                ],
            },
            {"tag": "empty", "items": []},
        ]
    },
}

API_DEPLOYMENT_CONFIG = {
    "apiVersion": "apps.openshift.io/v1",
    "kind": "DeploymentConfig",
    "metadata": {
        "name": "dep1",
        "namespace": "ns",
        "resourceVersion": "42",
        "labels": {"app": "dep1"},
    },
    "spec": {
        "replicas": 2,
        "triggers": [
            {"type": "ConfigChange"},
            {
                "type": "ImageChange",
                "imageChangeParams": {
                    "automatic": True,
                    "containerNames": ["web"],
                    "from": {"kind": "ImageStreamTag", "name": "app:latest"},
                },
            },
        ],
        "template": {
            "metadata": {"labels": {"app": "dep1"}},
            "spec": {
                "containers": [
                    {"name": "web", "image": "registry/app@sha256:OLD", "ports": []}
                ]
            },
        },
    },
}


class TestImageStream:
    """Test ImageStream"""

    def test_from_api(self) -> None:
        """Test tag histories are read oldest first"""
        stream = ImageStream.from_api(API_IMAGE_STREAM)
        assert stream.label == "ns/app"
        history = [event.docker_image_reference for event in stream.tags["latest"]]
        assert history == ["registry/app@sha256:OLD", "registry/app@sha256:NEW"]

    def test_from_api_without_status(self) -> None:
        """Test a stream which was never tagged"""
        stream = ImageStream.from_api({"metadata": {"name": "app", "namespace": "ns"}})
        assert not stream.tags

    @pytest.mark.parametrize(
        ("tag", "expected"),
        [
            pytest.param("latest", "registry/app@sha256:NEW", id="latest event"),
            pytest.param("", "registry/app@sha256:NEW", id="default tag"),
            pytest.param("empty", None, id="empty history"),
            pytest.param("missing", None, id="unknown tag"),
        ],
    )
    def test_latest_tagged_image(self, tag: str, expected: Optional[str]) -> None:
        """Test getting the latest event of a tag"""
        event = ImageStream.from_api(API_IMAGE_STREAM).latest_tagged_image(tag)
        if expected is None:
            assert event is None
        else:
            assert event is not None
            assert event.docker_image_reference == expected

    def test_latest_is_last_appended(self) -> None:
        """Test the latest event is the last one in the history"""
        stream = ImageStream(
            namespace="ns",
            name="app",
            tags={
                "v1": [
                    TagEvent(docker_image_reference="first"),
                    TagEvent(docker_image_reference="second"),
                ]
            },
        )
        event = stream.latest_tagged_image("v1")
        assert event is not None
        assert event.docker_image_reference == "second"

    @pytest.mark.parametrize(
        ("namespace", "name"),
        [
            pytest.param("", "app", id="empty namespace"),
            pytest.param("ns", "", id="empty name"),
        ],
    )
    def test_identity_required(self, namespace: str, name: str) -> None:
        """Test streams must have a namespace and a name"""
        with pytest.raises(ValidationError):
            ImageStream(namespace=namespace, name=name)

    @pytest.mark.parametrize(
        "metadata",
        [
            pytest.param({"name": "app"}, id="no namespace"),
            pytest.param({"namespace": "ns"}, id="no name"),
            pytest.param(None, id="no metadata"),
        ],
    )
    def test_from_api_identity_required(self, metadata: Optional[dict]) -> None:
        """Test objects without a namespace or a name are rejected by validation"""
        with pytest.raises(ValidationError):
            ImageStream.from_api({"metadata": metadata})


class TestDeploymentConfig:
    """Test DeploymentConfig"""

    def test_parse(self) -> None:
        """Test reading an API object"""
        config = DeploymentConfig.model_validate(API_DEPLOYMENT_CONFIG)
        assert config.label == "ns/dep1"
        assert config.metadata.resource_version == "42"
        params = config.spec.triggers[1].image_change_params
        assert params is not None
        assert params.automatic
        assert params.container_names == ["web"]
        assert params.from_.name == "app:latest"
        assert params.from_.namespace == ""
        assert params.last_triggered_image == ""
        assert config.spec.triggers[0].image_change_params is None

    def test_to_api_unchanged(self) -> None:
        """Test unmodeled fields survive a round trip"""
        config = DeploymentConfig.model_validate(API_DEPLOYMENT_CONFIG)
        assert config.to_api() == API_DEPLOYMENT_CONFIG

    def test_to_api_after_mutation(self) -> None:
        """Test mutated fields are written with their API names"""
        config = DeploymentConfig.model_validate(API_DEPLOYMENT_CONFIG)
        params = config.spec.triggers[1].image_change_params
        assert params is not None
        params.last_triggered_image = "registry/app@sha256:NEW"
        config.spec.template.spec.containers[0].image = "registry/app@sha256:NEW"

        body = config.to_api()
        trigger = body["spec"]["triggers"][1]["imageChangeParams"]
        assert trigger["lastTriggeredImage"] == "registry/app@sha256:NEW"
        container = body["spec"]["template"]["spec"]["containers"][0]
        assert container == {
            "name": "web",
            "image": "registry/app@sha256:NEW",
            "ports": [],
        }
        assert body["metadata"]["labels"] == {"app": "dep1"}
        assert body["spec"]["replicas"] == 2
