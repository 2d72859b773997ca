"""Entry points of the currency conversion library.

`convert` runs the full pipeline for one value. `add` and `multiply` combine two
already-normalized values and run only the rounding/encoding tail. `greater_than`
runs the pipeline for two option records and compares the results.

The module-level functions delegate to a default `CurrencyConverter`. Build your
own `CurrencyConverter` to use a differently configured `DecimalEngine`.

Example:
    >>> convert("0x3e8", from_numeric_base="hex", to_numeric_base="dec")
    '1000'
    >>> convert("1", to_denomination="WEI", to_numeric_base="dec")
    '1000000000000000000'
"""

from __future__ import annotations

from typing import Any, Mapping

from currency_conversion.domain.representation import (
    ConversionOptions,
    DenominationLike,
    NumericBase,
    NumericBaseLike,
    ValueLike,
)
from currency_conversion.engine.decimal_engine import DecimalEngine
from currency_conversion.pipeline.pipeline import ConversionPipeline

OptionsLike = ConversionOptions | Mapping[str, Any]


class CurrencyConverter:
    """Binds one `DecimalEngine` and one `ConversionPipeline` to the four entry points."""

    def __init__(self, engine: DecimalEngine | None = None, pipeline: ConversionPipeline | None = None):
        """Initialize the converter.

        Args:
            engine: Engine used by the entry points. Defaults to the pipeline's engine,
                or to the shared default engine when neither is given.
            pipeline: Pipeline to run. Defaults to the standard eight-stage pipeline
                built over $engine.
        """
        if pipeline is None:
            pipeline = ConversionPipeline.create_default(engine)
        self._pipeline = pipeline
        self._engine = engine or pipeline.engine

    @property
    def engine(self) -> DecimalEngine:
        return self._engine

    @property
    def pipeline(self) -> ConversionPipeline:
        return self._pipeline

    def convert(
        self,
        value: Any,
        *,
        from_currency: str | None = None,
        to_currency: str | None = None,
        from_numeric_base: NumericBaseLike | None = None,
        to_numeric_base: NumericBaseLike | None = None,
        from_denomination: DenominationLike | None = None,
        to_denomination: DenominationLike | None = None,
        number_of_decimals: int | None = None,
        conversion_rate: ValueLike | None = None,
        eth_to_usd_rate: ValueLike | None = None,
        invert_conversion_rate: bool | None = None,
    ) -> Any:
        """Convert $value from one representation into another.

        Options left at None skip the stage that reads them. $to_currency defaults
        to $from_currency, so a rate is applied only when both are given and differ.
        A missing or empty $value is treated as "0".

        Returns:
            The converted value: a Decimal, a string (after rounding or hex/dec
            encoding) or an int (`bn` encoding).
        """
        if to_currency is None:
            to_currency = from_currency
        if value is None or value == "":
            value = "0"

        record = ConversionOptions(
            value=value,
            from_currency=from_currency,
            to_currency=to_currency,
            from_numeric_base=from_numeric_base,
            to_numeric_base=to_numeric_base,
            from_denomination=from_denomination,
            to_denomination=to_denomination,
            number_of_decimals=number_of_decimals,
            conversion_rate=conversion_rate,
            eth_to_usd_rate=eth_to_usd_rate,
            invert_conversion_rate=invert_conversion_rate,
        )
        return self._pipeline.execute(record)

    def add(
        self,
        a: ValueLike,
        b: ValueLike,
        *,
        to_numeric_base: NumericBaseLike | None = None,
        number_of_decimals: int | None = None,
    ) -> Any:
        """Add two decimal values, then round and encode the sum.

        No base, denomination or currency handling is applied to $a and $b.
        """
        total = self._engine.add(a, b)
        return self._run_tail(total, to_numeric_base, number_of_decimals)

    def multiply(
        self,
        a: Any,
        b: Any,
        *,
        to_numeric_base: NumericBaseLike | None = None,
        number_of_decimals: int | None = None,
        multiplicand_base: NumericBaseLike | None = None,
        multiplier_base: NumericBaseLike | None = None,
    ) -> Any:
        """Multiply two values, each parsed in its own base, then round and encode.

        Args:
            multiplicand_base: Numeric base $a is written in. Defaults to decimal.
            multiplier_base: Numeric base $b is written in. Defaults to decimal.
        """
        multiplicand = self._engine.parse(a, multiplicand_base if multiplicand_base is not None else NumericBase.DEC)
        multiplier = self._engine.parse(b, multiplier_base if multiplier_base is not None else NumericBase.DEC)
        product = self._engine.multiply(multiplicand, multiplier)
        return self._run_tail(product, to_numeric_base, number_of_decimals)

    def greater_than(self, first: OptionsLike, second: OptionsLike) -> bool:
        """Return True if $first converts to a strictly greater value than $second.

        Each argument is a full option record carrying its own $value. No
        defaulting is applied; each side runs through the pipeline as given.
        """
        first_value = self._convert_to_decimal(ConversionOptions.coerce(first))
        second_value = self._convert_to_decimal(ConversionOptions.coerce(second))
        return self._engine.greater_than(first_value, second_value)

    def _run_tail(self, value, to_numeric_base, number_of_decimals) -> Any:
        record = ConversionOptions(
            value=value,
            to_numeric_base=to_numeric_base,
            number_of_decimals=number_of_decimals,
        )
        return self._pipeline.execute(record)

    def _convert_to_decimal(self, record: ConversionOptions):
        result = self._pipeline.execute(record)
        # Encoded results are read back in the base they were written in
        if record.to_numeric_base is not None:
            return self._engine.parse(result, record.to_numeric_base)
        return self._engine.to_decimal(result)


_DEFAULT_CONVERTER = CurrencyConverter()


def convert(value: Any, **options: Any) -> Any:
    """Convert $value with the default converter. See `CurrencyConverter.convert`."""
    return _DEFAULT_CONVERTER.convert(value, **options)


def add(a: ValueLike, b: ValueLike, **options: Any) -> Any:
    return _DEFAULT_CONVERTER.add(a, b, **options)


def multiply(a: Any, b: Any, **options: Any) -> Any:
    return _DEFAULT_CONVERTER.multiply(a, b, **options)


def greater_than(first: OptionsLike, second: OptionsLike) -> bool:
    return _DEFAULT_CONVERTER.greater_than(first, second)
