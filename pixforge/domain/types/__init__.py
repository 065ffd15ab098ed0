from pixforge.domain.types.crop import BreakpointSource, CropPoints, CropRect, MaxCropSize
from pixforge.domain.types.request import SMART_CROP, ScaleMode, TransformRequest
