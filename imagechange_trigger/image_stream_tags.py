"""Image stream tag reference helpers"""

from typing import Tuple

DEFAULT_IMAGE_TAG = "latest"


def split_image_stream_tag(name_and_tag: str) -> Tuple[str, str, bool]:
    """
    Split an "image-stream-name:tag" reference
    :param name_and_tag: reference to split
    :return: stream name, tag (defaults to "latest" when empty), and whether the
             reference contained a tag separator at all
    """
    name, sep, tag = name_and_tag.partition(":")
    return name, tag or DEFAULT_IMAGE_TAG, sep == ":"
