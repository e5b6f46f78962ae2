"""Pipeline infrastructure for the offer flow."""

from .base_step import PipelineStep
from .context import OfferContext
from .pipeline import Pipeline

__all__ = [
    "PipelineStep",
    "OfferContext",
    "Pipeline",
]
