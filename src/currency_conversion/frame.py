from __future__ import annotations

# Batch conversion helpers: run `convert` over a pandas Series or one DataFrame column.
# Inputs are never mutated; a converted copy is returned.

import logging
from typing import Any

import pandas as pd

from currency_conversion.converter import CurrencyConverter

logger = logging.getLogger(__name__)

_DEFAULT_CONVERTER = CurrencyConverter()


def convert_series(series: pd.Series, converter: CurrencyConverter | None = None, **options: Any) -> pd.Series:
    """Convert every element of $series with the same $options.

    Args:
    - $series (pd.Series): Values to convert (hex strings, decimal strings, ints, Decimals).
    - $converter (CurrencyConverter | None): Converter to use. Defaults to a shared default converter.
    - $options: Keyword options accepted by `CurrencyConverter.convert`.

    Returns:
        pd.Series: New Series with the same index and name, dtype `object`.

    Raises:
        TypeError: If $series is not a pandas Series.
    """
    # Check: $series must be a pandas Series
    if not isinstance(series, pd.Series):
        raise TypeError(f"$series must be a pandas Series, but provided value is: {type(series).__name__}")

    converter = converter or _DEFAULT_CONVERTER
    converted = [converter.convert(value, **options) for value in series.tolist()]
    return pd.Series(converted, index=series.index, name=series.name, dtype=object)


def convert_column(
    df: pd.DataFrame,
    column: str,
    target: str | None = None,
    converter: CurrencyConverter | None = None,
    **options: Any,
) -> pd.DataFrame:
    """Return a copy of $df with $column converted.

    Args:
    - $df (pd.DataFrame): Source frame; it is not mutated.
    - $column (str): Column holding the values to convert.
    - $target (str | None): Column receiving the converted values. When None, $column is overwritten.
    - $converter (CurrencyConverter | None): Converter to use.
    - $options: Keyword options accepted by `CurrencyConverter.convert`.

    Raises:
        TypeError: If $df is not a pandas DataFrame.
        KeyError: If $column is not in $df.
    """
    # Check: $df must be a pandas DataFrame
    if not isinstance(df, pd.DataFrame):
        raise TypeError(f"$df must be a pandas DataFrame, but provided value is: {type(df).__name__}")

    # Raise: $column must exist
    if column not in df.columns:
        raise KeyError(f"Column '{column}' not found. Available columns: {list(df.columns)}")

    target = target or column
    result = df.copy()
    result[target] = convert_series(df[column], converter=converter, **options)
    logger.debug(f"Converted {len(result)} row(s) from column '{column}' into '{target}'")
    return result
