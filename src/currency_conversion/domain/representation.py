from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, TypeAlias

from currency_conversion.domain.errors import UnknownDenominationError, UnknownNumericBaseError

# Anything a stage may find in $value: a Decimal, a raw number, a raw string
# (decimal or hex text) or an arbitrary-precision integer (`bn` base)
ValueLike: TypeAlias = Decimal | int | float | str

# Tags are accepted either as enum members or as their string form
NumericBaseLike: TypeAlias = "NumericBase | str | int"
DenominationLike: TypeAlias = "Denomination | str"


class NumericBase(Enum):
    """Encoding of a value as text or as an integer.

    Members:
        HEX: Hexadecimal text, optionally `0x`-prefixed on input, never prefixed on output.
        DEC: Decimal text.
        BN: Arbitrary-precision integer (Python `int`).
    """

    HEX = "hex"
    DEC = "dec"
    BN = "bn"

    @classmethod
    def parse(cls, tag: NumericBaseLike) -> NumericBase:
        """Resolve $tag into a `NumericBase`.

        Strings are matched case-insensitively. The radix integers 16 and 10 are
        accepted as aliases of HEX and DEC.

        Raises:
            UnknownNumericBaseError: If $tag does not name a known base.
        """
        if isinstance(tag, NumericBase):
            return tag
        # bool is an int subclass, but True/False are never a radix
        if isinstance(tag, int) and not isinstance(tag, bool):
            if tag in _RADIX_ALIASES:
                return _RADIX_ALIASES[tag]
            raise UnknownNumericBaseError(tag)
        if isinstance(tag, str):
            try:
                return cls(tag.strip().lower())
            except ValueError:
                pass
        raise UnknownNumericBaseError(tag)


_RADIX_ALIASES = {
    16: NumericBase.HEX,
    10: NumericBase.DEC,
}


class Denomination(Enum):
    """Named sub-unit of the base currency unit.

    The value of each member is its tag; `multiplier` is how many sub-units
    make one base unit.
    """

    WEI = "WEI"
    GWEI = "GWEI"

    @property
    def multiplier(self) -> Decimal:
        return _DENOMINATION_MULTIPLIERS[self]

    @classmethod
    def parse(cls, tag: DenominationLike) -> Denomination:
        """Resolve $tag into a `Denomination` (case-insensitive).

        Raises:
            UnknownDenominationError: If $tag does not name a known denomination.
        """
        if isinstance(tag, Denomination):
            return tag
        if isinstance(tag, str):
            try:
                return cls(tag.strip().upper())
            except ValueError:
                pass
        raise UnknownDenominationError(tag)


_DENOMINATION_MULTIPLIERS = {
    Denomination.WEI: Decimal("1000000000000000000"),
    Denomination.GWEI: Decimal("1000000000"),
}


@dataclass(frozen=True)
class ConversionOptions:
    """Describes what a value currently is and what it should become.

    One record is built per call and handed from stage to stage. Stages never
    mutate it; they return a copy with $value (or, for rate inversion,
    $conversion_rate) replaced. A field left at None means "skip the stage
    that reads it", which is different from supplying a default value.

    Attributes:
        value: The value being converted; changes type as it moves through stages.
        from_currency: Currency tag of $value.
        to_currency: Desired currency tag. Rate is applied only when it differs from $from_currency.
        from_numeric_base: Encoding of the incoming $value.
        to_numeric_base: Encoding of the result.
        from_denomination: Sub-unit the incoming $value is expressed in.
        to_denomination: Sub-unit the result should be expressed in.
        number_of_decimals: Digits kept after the decimal point (truncating).
        conversion_rate: Multiplier converting $from_currency into $to_currency.
        eth_to_usd_rate: Optional second multiplier applied after denomination.
        invert_conversion_rate: When truthy, $conversion_rate is replaced by its reciprocal first.
    """

    value: Any = None
    from_currency: str | None = None
    to_currency: str | None = None
    from_numeric_base: NumericBaseLike | None = None
    to_numeric_base: NumericBaseLike | None = None
    from_denomination: DenominationLike | None = None
    to_denomination: DenominationLike | None = None
    number_of_decimals: int | None = None
    conversion_rate: ValueLike | None = None
    eth_to_usd_rate: ValueLike | None = None
    invert_conversion_rate: bool | None = None

    def with_value(self, value: Any) -> ConversionOptions:
        """Return a copy of this record with $value replaced."""
        return dataclasses.replace(self, value=value)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> ConversionOptions:
        """Build a record from a mapping of snake_case field names.

        Raises:
            TypeError: If $mapping contains a key that is not a field of this record.
        """
        unknown = set(mapping) - _FIELD_NAMES
        if unknown:
            raise TypeError(f"Cannot build `ConversionOptions` because of unknown option(s): {sorted(unknown)}")
        return cls(**mapping)

    @classmethod
    def coerce(cls, options: ConversionOptions | Mapping[str, Any]) -> ConversionOptions:
        if isinstance(options, ConversionOptions):
            return options
        return cls.from_mapping(options)


_FIELD_NAMES = frozenset(f.name for f in dataclasses.fields(ConversionOptions))
