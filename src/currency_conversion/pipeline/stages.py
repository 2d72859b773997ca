from __future__ import annotations

# Stage library: each stage is a guard (does this stage apply to the record?) and a
# transform returning a new record. Transforms never mutate their input.

import dataclasses
from dataclasses import dataclass
from typing import Callable

from currency_conversion.domain.errors import MissingConversionRateError
from currency_conversion.domain.representation import ConversionOptions, Denomination, NumericBase
from currency_conversion.engine.decimal_engine import DecimalEngine

StageGuard = Callable[[ConversionOptions], bool]
StageTransform = Callable[[ConversionOptions, DecimalEngine], ConversionOptions]


@dataclass(frozen=True)
class Stage:
    """One conditionally-applied step of the conversion pipeline.

    Attributes:
        name (str): Name used in logs and errors.
        guard (StageGuard): Returns True when the record carries the option this stage reads.
        transform (StageTransform): Produces the next record.
    """

    name: str
    guard: StageGuard
    transform: StageTransform

    def applies_to(self, record: ConversionOptions) -> bool:
        return self.guard(record)

    def apply(self, record: ConversionOptions, engine: DecimalEngine) -> ConversionOptions:
        return self.transform(record, engine)


# region Guards


def should_invert_rate(record: ConversionOptions) -> bool:
    return bool(record.invert_conversion_rate)


def has_from_numeric_base(record: ConversionOptions) -> bool:
    return record.from_numeric_base is not None


def has_from_denomination(record: ConversionOptions) -> bool:
    return record.from_denomination is not None


def currencies_differ(record: ConversionOptions) -> bool:
    """True only when both currencies are set and not equal.

    A supplied $conversion_rate is ignored otherwise.
    """
    if record.from_currency is None or record.to_currency is None:
        return False
    return record.from_currency != record.to_currency


def has_to_denomination(record: ConversionOptions) -> bool:
    return record.to_denomination is not None


def has_secondary_rate(record: ConversionOptions) -> bool:
    return record.eth_to_usd_rate is not None


def has_number_of_decimals(record: ConversionOptions) -> bool:
    # Zero decimals counts as "not requested"
    return record.number_of_decimals is not None and record.number_of_decimals != 0


def has_to_numeric_base(record: ConversionOptions) -> bool:
    return record.to_numeric_base is not None


# endregion

# region Transforms


def invert_rate(record: ConversionOptions, engine: DecimalEngine) -> ConversionOptions:
    """Replace $conversion_rate by its reciprocal."""
    if record.conversion_rate is None:
        raise MissingConversionRateError("invert_rate")
    return dataclasses.replace(record, conversion_rate=engine.reciprocal(record.conversion_rate))


def decode_from_base(record: ConversionOptions, engine: DecimalEngine) -> ConversionOptions:
    return record.with_value(engine.parse(record.value, record.from_numeric_base))


def normalize_denomination(record: ConversionOptions, engine: DecimalEngine) -> ConversionOptions:
    """Express $value in whole base units (e.g. wei -> ether)."""
    denomination = Denomination.parse(record.from_denomination)
    return record.with_value(engine.divide(record.value, denomination.multiplier))


def apply_currency_rate(record: ConversionOptions, engine: DecimalEngine) -> ConversionOptions:
    if record.conversion_rate is None:
        raise MissingConversionRateError("apply_currency_rate")
    return record.with_value(engine.multiply(record.value, record.conversion_rate))


def specify_denomination(record: ConversionOptions, engine: DecimalEngine) -> ConversionOptions:
    """Express $value in sub-units, rounded to a whole number of them."""
    denomination = Denomination.parse(record.to_denomination)
    scaled = engine.multiply(record.value, denomination.multiplier)
    return record.with_value(engine.round_integral(scaled))


def apply_secondary_rate(record: ConversionOptions, engine: DecimalEngine) -> ConversionOptions:
    return record.with_value(engine.multiply(record.value, record.eth_to_usd_rate))


def round_to_decimals(record: ConversionOptions, engine: DecimalEngine) -> ConversionOptions:
    return record.with_value(engine.format_fixed(record.value, record.number_of_decimals))


def encode_to_base(record: ConversionOptions, engine: DecimalEngine) -> ConversionOptions:
    base = NumericBase.parse(record.to_numeric_base)
    if base is NumericBase.HEX:
        return record.with_value(engine.to_hex(record.value))
    if base is NumericBase.DEC:
        return record.with_value(engine.to_number_string(record.value))
    return record.with_value(engine.to_int(record.value))


# endregion

# Order matters: decode before normalize and rate, rate before re-denominating,
# rounding before the final encoding.
DEFAULT_STAGES: tuple[Stage, ...] = (
    Stage("invert_rate", should_invert_rate, invert_rate),
    Stage("decode_from_base", has_from_numeric_base, decode_from_base),
    Stage("normalize_denomination", has_from_denomination, normalize_denomination),
    Stage("apply_currency_rate", currencies_differ, apply_currency_rate),
    Stage("specify_denomination", has_to_denomination, specify_denomination),
    Stage("apply_secondary_rate", has_secondary_rate, apply_secondary_rate),
    Stage("round_to_decimals", has_number_of_decimals, round_to_decimals),
    Stage("encode_to_base", has_to_numeric_base, encode_to_base),
)
