from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import (
    MAX_EMAX,
    MAX_PREC,
    MIN_EMIN,
    ROUND_DOWN,
    ROUND_HALF_DOWN,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)

from currency_conversion.domain.representation import NumericBase, NumericBaseLike, ValueLike

_HEX_BODY = re.compile(r"[0-9a-fA-F]*(\.[0-9a-fA-F]+)?")
_HEX_ALPHABET = "0123456789abcdef"

# Outside [1e-6, 1e21) a JavaScript number prints in exponent notation
_PLAIN_NOTATION_MIN = 1e-6
_PLAIN_NOTATION_MAX = 1e21


def strip_hex_prefix(value):
    """Remove a leading `0x`/`0X` from $value (after an optional sign).

    Non-string values are returned unchanged.
    """
    if not isinstance(value, str):
        return value

    sign = ""
    if value[:1] in ("-", "+"):
        sign, value = value[:1], value[1:]
    if value[:2] in ("0x", "0X"):
        value = value[2:]
    return sign + value


@dataclass(frozen=True)
class EngineConfig:
    """Settings captured once by a `DecimalEngine`.

    Attributes:
        precision (int): Significant digits kept by division. Parsing, addition,
            multiplication and rounding are exact whatever their width.
        rounding (str): Default rounding mode (a `decimal.ROUND_*` constant) for
            division and for rounding to an integer.
        hex_fraction_digits (int): Maximum hex digits written after the point when
            encoding a fractional value; further digits are dropped.
    """

    precision: int = 78
    rounding: str = ROUND_HALF_DOWN
    hex_fraction_digits: int = 20

    def __post_init__(self) -> None:
        if not isinstance(self.precision, int) or self.precision < 1:
            raise ValueError(f"$precision must be a positive integer, but provided value is: {self.precision}")
        if not isinstance(self.hex_fraction_digits, int) or self.hex_fraction_digits < 0:
            raise ValueError(f"$hex_fraction_digits must be a non-negative integer, but provided value is: {self.hex_fraction_digits}")


class DecimalEngine:
    """Arbitrary-precision arithmetic used by the conversion stages.

    Every operation runs in one of the engine's own `decimal.Context`s: an
    unbounded one for operations with an exact result, and one built from
    $config for division. The process-wide `decimal` context is never read or
    modified.
    """

    def __init__(self, config: EngineConfig | None = None):
        self._config = config or EngineConfig()
        self._context = Context(
            prec=self._config.precision,
            rounding=self._config.rounding,
            traps=[InvalidOperation, DivisionByZero, Overflow],
        )
        # Parsing, addition, multiplication and rounding to a fixed exponent always
        # have a finite exact result, so they never round
        self._exact = Context(
            prec=MAX_PREC,
            Emax=MAX_EMAX,
            Emin=MIN_EMIN,
            rounding=self._config.rounding,
            traps=[InvalidOperation, DivisionByZero, Overflow],
        )

    @property
    def config(self) -> EngineConfig:
        return self._config

    # region Coercion and parsing

    def to_decimal(self, value: ValueLike) -> Decimal:
        """Coerce $value into a Decimal.

        Floats go through `str` to avoid binary noise.

        Raises:
            decimal.InvalidOperation: If $value is a string that is not a number.
            TypeError: If $value has a type Decimal cannot be built from.
        """
        if isinstance(value, Decimal):
            return value
        if isinstance(value, float):
            return self._exact.create_decimal(str(value))
        return self._exact.create_decimal(value)

    def parse(self, value, base: NumericBaseLike) -> Decimal:
        """Parse $value written in $base into a Decimal.

        Raises:
            UnknownNumericBaseError: If $base is not a known numeric base tag.
        """
        base = NumericBase.parse(base)
        if base is NumericBase.HEX:
            return self.parse_hex(value)
        if base is NumericBase.DEC:
            return self.to_decimal(value)

        # BN: round-trip through the hex text, like any base-16-native integer
        return self.parse_hex(format(value, "x"))

    def parse_hex(self, value) -> Decimal:
        """Parse hexadecimal text (optional sign, optional `0x`, optional fraction).

        Raises:
            ValueError: If $value is not hexadecimal text.
        """
        text = strip_hex_prefix(str(value).strip())
        negative = text.startswith("-")
        if text[:1] in ("-", "+"):
            text = text[1:]

        if not text or text == "." or not _HEX_BODY.fullmatch(text):
            raise ValueError(f"invalid hexadecimal literal: {value!r}")

        integer_text, _, fraction_text = text.partition(".")
        result = self._exact.create_decimal(int(integer_text, 16) if integer_text else 0)
        if fraction_text:
            # n hex digits over 16**n == (digits * 5**(4n)) / 10**(4n), exactly
            shift = 4 * len(fraction_text)
            scaled = self._exact.create_decimal(int(fraction_text, 16) * 5**shift)
            result = self._exact.add(result, scaled.scaleb(-shift, context=self._exact))

        return self._exact.minus(result) if negative else result

    # endregion

    # region Arithmetic

    def add(self, a: ValueLike, b: ValueLike) -> Decimal:
        return self._exact.add(self.to_decimal(a), self.to_decimal(b))

    def multiply(self, a: ValueLike, b: ValueLike) -> Decimal:
        return self._exact.multiply(self.to_decimal(a), self.to_decimal(b))

    def divide(self, a: ValueLike, b: ValueLike) -> Decimal:
        """Divide $a by $b using the engine's default rounding.

        Raises:
            decimal.DivisionByZero: If $b is zero (and $a is not).
        """
        return self._context.divide(self.to_decimal(a), self.to_decimal(b))

    def reciprocal(self, value: ValueLike) -> Decimal:
        return self.divide(Decimal(1), value)

    def round_integral(self, value: ValueLike) -> Decimal:
        """Round $value to an integer with the engine's default rounding mode."""
        return self.to_decimal(value).to_integral_value(rounding=self._config.rounding, context=self._exact)

    def greater_than(self, a: ValueLike, b: ValueLike) -> bool:
        return self._exact.compare_signal(self.to_decimal(a), self.to_decimal(b)) > 0

    # endregion

    # region Serialization

    def format_fixed(self, value: ValueLike, decimals: int) -> str:
        """Write $value with exactly $decimals fractional digits, truncating toward zero.

        No grouping separators are written.

        Raises:
            ValueError: If $decimals is not a non-negative integer.
        """
        if isinstance(decimals, bool) or not isinstance(decimals, int) or decimals < 0:
            raise ValueError(f"$decimals must be a non-negative integer, but provided value is: {decimals!r}")

        exponent = Decimal(1).scaleb(-decimals, context=self._exact)
        rounded = self.to_decimal(value).quantize(exponent, rounding=ROUND_DOWN, context=self._exact)
        return format(rounded, "f")

    def to_hex(self, value: ValueLike) -> str:
        """Write $value as lowercase hexadecimal without a `0x` prefix.

        Fractional values get at most `config.hex_fraction_digits` digits after the
        point; the remainder is dropped.

        Raises:
            ValueError: If $value is NaN or infinite.
        """
        decimal_value = self.to_decimal(value)
        if not decimal_value.is_finite():
            raise ValueError(f"Cannot encode non-finite value {decimal_value} as hexadecimal")

        sign = "-" if decimal_value < 0 else ""
        magnitude = decimal_value.copy_abs()
        integer = int(magnitude)
        fraction = self._exact.subtract(magnitude, integer)

        digits = []
        while fraction and len(digits) < self._config.hex_fraction_digits:
            fraction = self._exact.multiply(fraction, 16)
            digit = int(fraction)
            digits.append(_HEX_ALPHABET[digit])
            fraction = self._exact.subtract(fraction, digit)

        text = format(integer, "x")
        fraction_text = "".join(digits).rstrip("0")
        if fraction_text:
            text = f"{text}.{fraction_text}"
        return sign + text

    def to_number_string(self, value: ValueLike) -> str:
        """Write $value the way a JavaScript number prints in base 10.

        The value is first squeezed through an IEEE double, so digits beyond
        double precision are lost. Plain notation is used for magnitudes in
        [1e-6, 1e21), exponent notation (`1e+21`, `1.5e-7`) otherwise.
        """
        number = float(self.to_decimal(value))
        if math.isnan(number):
            return "NaN"
        if math.isinf(number):
            return "Infinity" if number > 0 else "-Infinity"
        if number == 0:
            return "0"

        # repr() yields the shortest text that round-trips to the same double
        shortest = Decimal(repr(number)).normalize(self._context)
        if _PLAIN_NOTATION_MIN <= abs(number) < _PLAIN_NOTATION_MAX:
            return format(shortest, "f")
        return format(shortest, "e")

    def to_int(self, value: ValueLike) -> int:
        """Rebuild $value as a Python int from its hexadecimal text (fraction dropped)."""
        integer_text = self.to_hex(value).partition(".")[0]
        return int(integer_text, 16)

    # endregion


DEFAULT_ENGINE = DecimalEngine()
