"""Decide whether an image change trigger follows an image stream"""

from .image_stream_tags import split_image_stream_tag
from .models import DeploymentConfig, ImageChangeParams, ImageStream


def trigger_matches_image(
    config: DeploymentConfig, params: ImageChangeParams, stream: ImageStream
) -> bool:
    """
    Check if the trigger of a deployment config refers to an image stream.
    A trigger without an explicit namespace refers to the namespace of its config.
    :param config: the config owning the trigger
    :param params: the trigger's image change parameters
    :param stream: the image stream that changed
    :return: True if the reference is valid and names the stream
    """
    namespace = params.from_.namespace or config.namespace
    name, _, ok = split_image_stream_tag(params.from_.name)
    return ok and stream.namespace == namespace and stream.name == name
