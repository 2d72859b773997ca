"""Decimal engine package.

Thin adapter over the standard `decimal` module providing parsing, arithmetic and
serialization for every numeric base the conversion pipeline understands.
"""

from currency_conversion.engine.decimal_engine import DEFAULT_ENGINE, DecimalEngine, EngineConfig, strip_hex_prefix

__all__ = ["DEFAULT_ENGINE", "DecimalEngine", "EngineConfig", "strip_hex_prefix"]
