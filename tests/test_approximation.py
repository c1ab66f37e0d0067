from datetime import date

import pytest

from bikram_sambat.api.approximation import approximate_bs
from bikram_sambat.api.calendar_data import load_default_table
from bikram_sambat.api.converter import get_default_converter


@pytest.mark.parametrize("value", [date(2024, 10, 19), date(1990, 6, 1), date(1950, 12, 31), date(2035, 2, 14)])
def test_estimate_is_within_a_few_days_of_exact(value):
    converter = get_default_converter()
    year, month, day = approximate_bs(value, load_default_table())
    estimate = converter.to_ad(year, month, day)
    assert abs((estimate - value).days) <= 5


def test_estimate_is_clamped_to_table_years():
    table = load_default_table()
    year, month, day = approximate_bs(date(2060, 1, 1), table)
    assert year == 2100
    assert 1 <= day <= table.month_length(year, month)

    year, _, _ = approximate_bs(date(1900, 1, 1), table)
    assert year == 1970
