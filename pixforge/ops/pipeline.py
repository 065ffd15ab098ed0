"""
Generation pipeline.

One call runs a linear sequence of stages::

    ValidateSource -> StageTemp -> Dispatch -> Optimize -> ValidateOutput -> Commit | Fallback

All mutation happens on a staged copy next to the target; the target only
appears through an atomic rename. Corrupt image bytes at either validation
checkpoint degrade to a placeholder and never raise.
"""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple, Union

from pixforge.domain.exceptions import DecodeFailure, EncodeFailure, SourceNotFound, TargetExists
from pixforge.domain.types.crop import BreakpointSource
from pixforge.domain.types.request import TransformRequest
from pixforge.io.formats import is_valid_image
from pixforge.io.fs import copy_file, rename_file, silent_remove, temp_path_for
from pixforge.io.settings import GeneratorSettings
from pixforge.io.url import encode_filename
from pixforge.ops.image import ImageHandle
from pixforge.ops.optimize import DefaultOptimizer, Optimizer
from pixforge.ops.render.placeholder import DefaultPlaceholderRenderer, PlaceholderRenderer
from pixforge.ops.transforms.corner import crop_by_corner
from pixforge.ops.transforms.registry import Strategy, TransformContext, apply_transform
from pixforge.ops.transforms.smart import SaliencySmartCrop, SmartCrop

logger = logging.getLogger(__name__)


class Stage(str, enum.Enum):
    VALIDATE_SOURCE = "validate_source"
    STAGE_TEMP = "stage_temp"
    DISPATCH = "dispatch"
    OPTIMIZE = "optimize"
    VALIDATE_OUTPUT = "validate_output"
    COMMIT = "commit"
    FALLBACK = "fallback"


@dataclass
class GenerationResult:
    target_path: str
    committed: bool = False
    strategy: Optional[Strategy] = None
    stages: List[Stage] = field(default_factory=list)
    placeholder: Any = None
    advisories: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.committed


class ImageGenerator:
    """
    Generates derivative images from a source file and a transform request.

    Collaborators default to the bundled implementations and can be replaced
    per instance; nothing is shared between instances.
    """

    def __init__(
        self,
        settings: Optional[GeneratorSettings] = None,
        optimizer: Optional[Optimizer] = None,
        smart_crop: Optional[SmartCrop] = None,
        placeholder: Optional[PlaceholderRenderer] = None,
        breakpoints: Optional[BreakpointSource] = None,
    ):
        self.settings = settings or GeneratorSettings()
        self.optimizer = optimizer or DefaultOptimizer()
        self.smart_crop = smart_crop or SaliencySmartCrop()
        self.placeholder = placeholder or DefaultPlaceholderRenderer()
        self.breakpoints = breakpoints if breakpoints is not None else self.settings

    def from_url(self, url: Optional[str], params: Union[TransformRequest, Mapping[str, Any]]) -> str:
        """
        URL of the derivative of ``url`` for ``params``. Missing URLs resolve to
        the configured placeholder under ``settings.base_url``.
        """
        return encode_filename(
            url, params, base_url=self.settings.base_url, placeholder_name=self.settings.placeholder_name
        )

    def is_ok(self, path: str, format: Optional[str] = None) -> bool:
        return is_valid_image(path, format)

    def crop_by_corner_file(self, path: str, corner: str, size: Tuple[Optional[int], Optional[int]]) -> None:
        """Corner-crop the file at ``path`` in place."""
        image = ImageHandle.from_file(path)
        crop_by_corner(image, corner, size, legacy_anchor=self.settings.legacy_corner_anchor)
        image.save(path)

    def quality_for(self, request: TransformRequest) -> int:
        return self.settings.quality_for(request.width, request.height)

    def generate(self, request: TransformRequest, source_path: str, target_path: str) -> GenerationResult:
        """
        Transform ``source_path`` into ``target_path``.

        :raises SourceNotFound: if the source file does not exist.
        :raises TargetExists: if the target file already exists.
        """
        result = GenerationResult(target_path=str(target_path), advisories=request.advisories)

        result.stages.append(Stage.VALIDATE_SOURCE)
        if not os.path.isfile(source_path):
            raise SourceNotFound(f'Source file does not exist "{source_path}".')
        if os.path.isfile(target_path):
            raise TargetExists(f'Target file exist "{target_path}".')
        if not self.is_ok(source_path):
            logger.warning(f"Source {source_path} is not a valid image, rendering placeholder")
            return self._fallback(request, result)

        result.stages.append(Stage.STAGE_TEMP)
        temp_path = temp_path_for(str(target_path), self.settings.temp_suffix)
        copy_file(source_path, temp_path)

        try:
            result.stages.append(Stage.DISPATCH)
            context = TransformContext(
                breakpoints=self.breakpoints,
                smart_crop=self.smart_crop,
                legacy_corner_anchor=self.settings.legacy_corner_anchor,
            )
            result.strategy = apply_transform(temp_path, request, context)
            logger.debug(f"{request.size_token} {result.strategy.value} applied to {temp_path}")

            result.stages.append(Stage.OPTIMIZE)
            self.optimizer.optimize(temp_path, self.quality_for(request))
        except (DecodeFailure, EncodeFailure) as e:
            logger.warning(f"Transform of {source_path} failed: {e}")
            return self._fallback(request, result, temp_path)
        except BaseException:
            silent_remove(temp_path)
            raise

        result.stages.append(Stage.VALIDATE_OUTPUT)
        if not self.is_ok(temp_path):
            logger.warning(f"Output {temp_path} is not a valid image, rendering placeholder")
            return self._fallback(request, result, temp_path)

        result.stages.append(Stage.COMMIT)
        rename_file(temp_path, str(target_path))
        result.committed = True
        logger.info(f"Generated {target_path} ({result.strategy.value}, {request.size_token})")
        return result

    def _fallback(
        self, request: TransformRequest, result: GenerationResult, temp_path: Optional[str] = None
    ) -> GenerationResult:
        result.stages.append(Stage.FALLBACK)
        if temp_path is not None:
            silent_remove(temp_path)
        try:
            result.placeholder = self.placeholder.render(request.size_token)
        except Exception:
            logger.exception(f"Placeholder {request.size_token} could not be rendered")
        return result
