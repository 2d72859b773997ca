"""Conversion pipeline.

The stage library (`stages`) and the executor (`pipeline`) that applies the stages
to a `ConversionOptions` record in a fixed order.
"""

from currency_conversion.pipeline.pipeline import ConversionPipeline
from currency_conversion.pipeline.stages import DEFAULT_STAGES, Stage

__all__ = ["ConversionPipeline", "DEFAULT_STAGES", "Stage"]
