from concurrent.futures import ThreadPoolExecutor
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

import pytest

from currency_conversion import (
    ConversionOptions,
    CurrencyConverter,
    DecimalEngine,
    EngineConfig,
    add,
    convert,
    greater_than,
    multiply,
)
from currency_conversion.domain.errors import MissingConversionRateError, UnknownNumericBaseError
from currency_conversion.engine.decimal_engine import DEFAULT_ENGINE

ONE_ETH_IN_WEI_HEX = "0xde0b6b3a7640000"


# region Scenarios


def test_hex_to_dec():
    assert convert("0x3e8", from_numeric_base="hex", to_numeric_base="dec") == "1000"


def test_wei_to_base_unit():
    assert convert("1000000000000000000", from_denomination="WEI", to_numeric_base="dec") == "1"


def test_base_unit_to_wei():
    assert convert("1", to_denomination="WEI", to_numeric_base="dec") == "1000000000000000000"


def test_currency_conversion_with_rate():
    assert convert("10", from_currency="ETH", to_currency="USD", conversion_rate=2, to_numeric_base="dec") == "20"


def test_add():
    assert add("5", "3", to_numeric_base="dec") == "8"


def test_multiply():
    assert multiply("2", "3", to_numeric_base="dec") == "6"


def test_greater_than():
    assert greater_than({"value": "10", "to_numeric_base": "dec"}, {"value": "5", "to_numeric_base": "dec"}) is True


# endregion

# region convert


def test_wei_hex_to_fiat_with_two_decimals():
    result = convert(
        ONE_ETH_IN_WEI_HEX,
        from_numeric_base="hex",
        from_denomination="WEI",
        from_currency="ETH",
        to_currency="USD",
        conversion_rate="2500.5",
        number_of_decimals=2,
    )
    assert result == "2500.50"


def test_gwei_to_wei_hex():
    result = convert("1", from_numeric_base="dec", from_denomination="GWEI", to_denomination="WEI", to_numeric_base="hex")
    assert result == "3b9aca00"


def test_missing_value_defaults_to_zero():
    assert convert(None) == "0"
    assert convert("", to_numeric_base="dec") == "0"


def test_zero_int_is_kept_for_bn_input():
    assert convert(0, from_numeric_base="bn", to_numeric_base="hex") == "0"


def test_to_currency_defaults_to_from_currency():
    # No to_currency, so the rate is not applied
    assert convert("10", from_currency="ETH", conversion_rate=2, to_numeric_base="dec") == "10"


@pytest.mark.parametrize("currencies", [("ETH", "ETH"), (None, "USD"), (None, None)])
def test_rate_is_ignored_unless_currencies_differ(currencies):
    from_currency, to_currency = currencies
    with_rate = convert("7.25", from_currency=from_currency, to_currency=to_currency, conversion_rate="3", to_numeric_base="dec")
    without_rate = convert("7.25", from_currency=from_currency, to_currency=to_currency, to_numeric_base="dec")
    assert with_rate == without_rate == "7.25"


def test_inverted_rate_equals_reciprocal_rate():
    inverted = convert("10", from_currency="A", to_currency="B", conversion_rate="3", invert_conversion_rate=True)
    reciprocal = convert("10", from_currency="A", to_currency="B", conversion_rate=DEFAULT_ENGINE.reciprocal("3"))
    assert inverted == reciprocal


def test_secondary_rate_applies_regardless_of_currencies():
    assert convert("2", eth_to_usd_rate="3", to_numeric_base="dec") == "6"
    assert convert("2", from_currency="ETH", to_currency="ETH", eth_to_usd_rate="3", to_numeric_base="dec") == "6"


def test_rounding_truncates():
    assert convert("1.999", number_of_decimals=2) == "1.99"
    assert convert("-1.999", number_of_decimals=2) == "-1.99"


def test_zero_decimals_skips_rounding():
    assert convert("1.999", number_of_decimals=0) == "1.999"


def test_rounding_happens_before_encoding():
    # 255.99 is truncated to 255.9 first, so the hex fraction is that of 0.9
    assert convert("255.99", number_of_decimals=1, to_numeric_base="hex") == "ff.e" + "6" * 19


def test_hex_bn_round_trip():
    as_int = convert("0x3e8", from_numeric_base="hex", to_numeric_base="bn")
    assert as_int == 1000
    assert convert(as_int, from_numeric_base="bn", to_numeric_base="hex") == "3e8"


MAX_UINT256 = 2**256 - 1
WIDE_INTEGERS = [int("9" * n) for n in (1, 18, 28, 29, 40, 60, 77)] + [10**28 + 1, 10**29 + 1, MAX_UINT256]


@pytest.mark.parametrize("integer", WIDE_INTEGERS)
def test_integer_round_trips_keep_every_digit(integer):
    hex_text = format(integer, "x")

    assert convert("0x" + hex_text, from_numeric_base="hex", to_numeric_base="hex") == hex_text
    as_int = convert(hex_text, from_numeric_base="hex", to_numeric_base="bn")
    assert as_int == integer
    assert convert(as_int, from_numeric_base="bn", to_numeric_base="hex") == hex_text
    assert convert(str(integer), from_numeric_base="dec", to_numeric_base="hex") == hex_text


def test_rounding_wide_values_to_decimals():
    result = convert("0x" + "f" * 64, from_numeric_base="hex", number_of_decimals=2)
    assert result == f"{MAX_UINT256}.00"


def test_specifying_denomination_of_wide_values_is_exact():
    result = convert(str(MAX_UINT256), to_denomination="GWEI", to_numeric_base="bn")
    assert result == MAX_UINT256 * 10**9


def test_wide_amounts_multiply_exactly():
    assert multiply(str(MAX_UINT256), "1000000000000000000", to_numeric_base="bn") == MAX_UINT256 * 10**18


def test_denomination_round_trip():
    in_wei = convert("1.5", to_denomination="WEI")
    assert in_wei == Decimal("1500000000000000000")
    assert convert(in_wei, from_denomination="WEI") == Decimal("1.5")


def test_missing_rate_raises():
    with pytest.raises(MissingConversionRateError):
        convert("10", from_currency="ETH", to_currency="USD")


def test_unknown_base_raises():
    with pytest.raises(UnknownNumericBaseError):
        convert("10", from_numeric_base="oct")


def test_malformed_input_raises_engine_errors():
    with pytest.raises(ValueError):
        convert("zz", from_numeric_base="hex")
    with pytest.raises(InvalidOperation):
        convert("abc", from_numeric_base="dec")
    with pytest.raises(TypeError):
        convert(object(), from_numeric_base="dec")


def test_unknown_option_raises():
    with pytest.raises(TypeError):
        convert("1", toNumericBase="dec")


# endregion

# region add / multiply


def test_add_without_options_returns_decimal():
    assert add("0.1", "0.2") == Decimal("0.3")


def test_add_rounds_before_encoding():
    assert add("1.005", "2", number_of_decimals=2) == "3.00"
    assert add("1.9", "0.05", number_of_decimals=1, to_numeric_base="dec") == "1.9"


def test_multiply_parses_each_operand_in_its_base():
    assert multiply("ff", "2", multiplicand_base="hex", to_numeric_base="dec") == "510"
    assert multiply("0x10", "0x10", multiplicand_base=16, multiplier_base=16, to_numeric_base="hex") == "100"


def test_multiply_gas_price_by_gas_limit():
    # 21000 gas at 0x4a817c800 wei (20 gwei)
    fee = multiply("0x4a817c800", "21000", multiplicand_base="hex", to_numeric_base="hex")
    assert int(fee, 16) == 20_000_000_000 * 21000


# endregion

# region greater_than


def test_greater_than_compares_numerically_after_encoding():
    first = {"value": "0x10", "from_numeric_base": "hex", "to_numeric_base": "hex"}
    second = {"value": "0x9", "from_numeric_base": "hex", "to_numeric_base": "hex"}
    assert greater_than(first, second) is True
    assert greater_than(second, first) is False


def test_greater_than_is_strict():
    record = ConversionOptions(value="5", to_numeric_base="dec")
    assert greater_than(record, record) is False


def test_greater_than_runs_full_pipeline_per_side():
    first = ConversionOptions(value="1", from_currency="ETH", to_currency="USD", conversion_rate="2000")
    second = ConversionOptions(value="1500")
    assert greater_than(first, second) is True


def test_greater_than_rejects_unknown_keys():
    with pytest.raises(TypeError):
        greater_than({"value": "1", "toNumericBase": "dec"}, {"value": "1"})


# endregion


def test_converter_with_custom_engine():
    converter = CurrencyConverter(engine=DecimalEngine(EngineConfig(rounding=ROUND_HALF_UP)))
    assert converter.convert("0.0000000000000000005", to_denomination="WEI") == Decimal(1)
    assert convert("0.0000000000000000005", to_denomination="WEI") == Decimal(0)


def test_concurrent_calls_do_not_interfere():
    values = [str(n) for n in range(200)]
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda v: convert(v, to_denomination="GWEI", to_numeric_base="dec"), values))
    assert results == [str(n * 1_000_000_000) for n in range(200)]
