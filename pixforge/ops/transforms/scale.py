from __future__ import annotations

from typing import Optional, Tuple

from pixforge.domain.types.request import ScaleMode, TransformRequest
from pixforge.ops.image import ImageHandle
from pixforge.ops.transforms.geometry import ResizeMode, ratio_target, should_resize_by_ratio
from pixforge.ops.transforms.registry import Strategy, TransformContext, register_transform


def scale(image: ImageHandle, mode: ScaleMode, size: Tuple[Optional[int], Optional[int]]) -> ImageHandle:
    """
    Resize ``image`` in place.

    * ratio: keep the aspect ratio; refuses to grow 1.3x or more
    * cover: fill the box exactly, cropping the overflow
    * absolute: stretch to the box, but never enlarge
    """
    width, height = size
    if mode is ScaleMode.RATIO:
        original = (image.width, image.height)
        width, height = ratio_target(original, (width, height))
        if should_resize_by_ratio(original, (width, height)):
            image.resize(width, height, ResizeMode.FIT)
    elif mode is ScaleMode.COVER:
        image.resize(width, height, ResizeMode.EXACT)
    elif mode is ScaleMode.ABSOLUTE:
        image.resize(width, height, ResizeMode.SHRINK_STRETCH)
    return image


@register_transform(Strategy.SCALE)
def scale_transform(path: str, request: TransformRequest, context: TransformContext) -> None:
    image = ImageHandle.from_file(path)
    scale(image, request.scale, request.size)
    image.save(path)
