from __future__ import annotations


class ConversionError(ValueError):
    """Base class for errors raised by the conversion pipeline itself.

    Errors coming from the decimal engine (`InvalidOperation`, `ValueError` from
    hex parsing, `TypeError` from coercion) are not wrapped and propagate as-is.
    """


class UnknownNumericBaseError(ConversionError):
    """Raised when a numeric base tag is not one of `hex`, `dec`, `bn`."""

    def __init__(self, tag: object):
        self.tag = tag
        super().__init__(f"Unknown numeric base $tag: {tag!r}. Expected one of 'hex', 'dec', 'bn'")


class UnknownDenominationError(ConversionError):
    """Raised when a denomination tag is not one of `WEI`, `GWEI`."""

    def __init__(self, tag: object):
        self.tag = tag
        super().__init__(f"Unknown denomination $tag: {tag!r}. Expected one of 'WEI', 'GWEI'")


class MissingConversionRateError(ConversionError):
    """Raised when a stage needs $conversion_rate but none was supplied."""

    def __init__(self, stage_name: str):
        self.stage_name = stage_name
        super().__init__(f"Cannot run stage `{stage_name}` because $conversion_rate is not set")
