from __future__ import annotations

import logging
from typing import Any, Sequence

from currency_conversion.domain.representation import ConversionOptions
from currency_conversion.engine.decimal_engine import DEFAULT_ENGINE, DecimalEngine
from currency_conversion.pipeline.stages import DEFAULT_STAGES, Stage

logger = logging.getLogger(__name__)


class ConversionPipeline:
    """Runs stages in a fixed order over one `ConversionOptions` record.

    Each stage is skipped when its guard is False, but stages are never
    reordered. The pipeline keeps no state between runs, so one instance can
    serve any number of concurrent calls.

    Failures are fail-fast: the first stage that raises aborts the run and the
    exception reaches the caller unchanged.
    """

    def __init__(self, stages: Sequence[Stage], engine: DecimalEngine | None = None) -> None:
        """Initialize the pipeline.

        Args:
            stages: Ordered stages to run.
            engine: Decimal engine handed to every stage. Defaults to `DEFAULT_ENGINE`.
        """
        self._stages = tuple(stages)
        self._engine = engine or DEFAULT_ENGINE

    @classmethod
    def create_default(cls, engine: DecimalEngine | None = None) -> ConversionPipeline:
        """Create the standard eight-stage conversion pipeline.

        Stages run in this order:
        1. invert_rate
        2. decode_from_base
        3. normalize_denomination
        4. apply_currency_rate
        5. specify_denomination
        6. apply_secondary_rate
        7. round_to_decimals
        8. encode_to_base
        """
        return cls(DEFAULT_STAGES, engine)

    @property
    def stages(self) -> tuple[Stage, ...]:
        return self._stages

    @property
    def engine(self) -> DecimalEngine:
        return self._engine

    def run(self, record: ConversionOptions) -> ConversionOptions:
        """Run every applicable stage and return the final record."""
        for i, stage in enumerate(self._stages):
            if not stage.applies_to(record):
                logger.debug(f"Skipping stage [{i + 1}/{len(self._stages)}]: {stage.name}")
                continue

            logger.debug(f"Running stage [{i + 1}/{len(self._stages)}]: {stage.name}")
            try:
                record = stage.apply(record, self._engine)
            except Exception as e:
                logger.error(f"Stage `{stage.name}` failed for $value {record.value!r}: {e!r}")
                raise

        return record

    def execute(self, record: ConversionOptions) -> Any:
        """Run the pipeline and return only the final $value."""
        return self.run(record).value
