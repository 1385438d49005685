"""Image stream and deployment config models"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .image_stream_tags import DEFAULT_IMAGE_TAG

IMAGE_CHANGE_TRIGGER = "ImageChange"


class ApiModel(BaseModel):
    """
    Model of an OpenShift API object section.
    Fields which are not modeled are kept so a full replacement does not lose them.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class TagEvent(ApiModel):
    """A resolved image reference recorded for a tag"""

    created: str = ""
    docker_image_reference: str = Field(default="", alias="dockerImageReference")
    image: str = ""


class ImageStream(BaseModel):
    """
    Tag histories of an image stream.
    Each history is ordered oldest first, so its last event is the latest one.
    """

    model_config = ConfigDict(frozen=True)

    namespace: str = Field(min_length=1)
    name: str = Field(min_length=1)
    tags: dict[str, list[TagEvent]] = Field(default_factory=dict)

    @property
    def label(self) -> str:
        """namespace/name of the stream"""
        return f"{self.namespace}/{self.name}"

    @classmethod
    def from_api(cls, obj: dict[str, Any]) -> "ImageStream":
        """
        Create an image stream from an image.openshift.io/v1 ImageStream object.
        The API lists the events of each tag newest first.

        :param obj: ImageStream object as returned by the API
        """
        metadata = obj.get("metadata") or {}
        tags = {
            named["tag"]: [
                TagEvent.model_validate(item)
                for item in reversed(named.get("items") or [])
            ]
            for named in (obj.get("status") or {}).get("tags") or []
        }
        return cls(
            namespace=metadata.get("namespace", ""),
            name=metadata.get("name", ""),
            tags=tags,
        )

    def latest_tagged_image(self, tag: str) -> Optional[TagEvent]:
        """
        Get the most recent event of a tag
        :param tag: tag name, "latest" when empty
        :return: the latest event, None if the tag has no events yet
        """
        history = self.tags.get(tag or DEFAULT_IMAGE_TAG)
        if not history:
            return None
        return history[-1]


class ObjectReference(ApiModel):
    """Reference to the image stream tag a trigger follows"""

    kind: str = "ImageStreamTag"
    namespace: str = ""
    name: str = ""


class ImageChangeParams(ApiModel):
    """Parameters of an image change trigger"""

    automatic: bool = False
    container_names: list[str] = Field(default_factory=list, alias="containerNames")
    from_: ObjectReference = Field(default_factory=ObjectReference, alias="from")
    last_triggered_image: str = Field(default="", alias="lastTriggeredImage")


class DeploymentTrigger(ApiModel):
    """A deployment config trigger, only image change triggers carry parameters"""

    type: str
    image_change_params: Optional[ImageChangeParams] = Field(
        default=None, alias="imageChangeParams"
    )


class Container(ApiModel):
    """pod template container"""

    name: str
    image: str = ""


class PodSpec(ApiModel):
    """pod template spec"""

    containers: list[Container] = Field(default_factory=list)


class PodTemplateSpec(ApiModel):
    """pod template"""

    spec: PodSpec = Field(default_factory=PodSpec)


class DeploymentConfigSpec(ApiModel):
    """deployment config spec"""

    triggers: list[DeploymentTrigger] = Field(default_factory=list)
    paused: bool = False
    template: PodTemplateSpec = Field(default_factory=PodTemplateSpec)


class ObjectMeta(ApiModel):
    """object metadata"""

    name: str
    namespace: str
    resource_version: Optional[str] = Field(default=None, alias="resourceVersion")


class DeploymentConfig(ApiModel):
    """apps.openshift.io/v1 DeploymentConfig"""

    api_version: str = Field(default="apps.openshift.io/v1", alias="apiVersion")
    kind: str = "DeploymentConfig"
    metadata: ObjectMeta
    spec: DeploymentConfigSpec = Field(default_factory=DeploymentConfigSpec)

    @property
    def name(self) -> str:
        """config name"""
        return self.metadata.name

    @property
    def namespace(self) -> str:
        """config namespace"""
        return self.metadata.namespace

    @property
    def label(self) -> str:
        """namespace/name of the config"""
        return f"{self.namespace}/{self.name}"

    def to_api(self) -> dict[str, Any]:
        """Dump the config as an API object body"""
        return self.model_dump(by_alias=True, exclude_unset=True)
