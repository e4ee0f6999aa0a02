"""Chart render models: compute, diagnose, animate and infer."""

from chartmodel.compute import compute_model
from chartmodel.defs import attach_defs, patch_render_model
from chartmodel.infer import infer_spec
from chartmodel.model import RenderModel
from chartmodel.transition import interpolate_model

__version__ = "0.1.0"

__all__ = [
    "RenderModel",
    "__version__",
    "attach_defs",
    "compute_model",
    "infer_spec",
    "interpolate_model",
    "patch_render_model",
]
