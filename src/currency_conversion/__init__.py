__version__ = "0.1.0"

from currency_conversion.converter import CurrencyConverter, add, convert, greater_than, multiply
from currency_conversion.domain.representation import ConversionOptions, Denomination, NumericBase
from currency_conversion.engine.decimal_engine import DecimalEngine, EngineConfig

__all__ = [
    "ConversionOptions",
    "CurrencyConverter",
    "DecimalEngine",
    "Denomination",
    "EngineConfig",
    "NumericBase",
    "add",
    "convert",
    "greater_than",
    "multiply",
]
