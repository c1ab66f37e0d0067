import logging
from datetime import date

import pytest

from bikram_sambat.api.calendar_data import CalendarTable, load_default_table
from bikram_sambat.api.converter import BSDate, BikramSambatConverter, get_default_converter
from bikram_sambat.api.exceptions import ApproximationRequired, DataIntegrityError, YearOutOfRangeError
from bikram_sambat.api.year_cache import REFERENCE_ANCHOR, ReferenceAnchor, YearCache, get_default_cache


def table_without(*years):
    table = load_default_table()
    return CalendarTable({year: table.months(year) for year in table.years() if year not in years})


def test_reference_year_starts_at_zero():
    entry = get_default_cache().entry(REFERENCE_ANCHOR.bs_year)
    assert entry.days_from_reference == 0
    assert entry.crosses_gap is False


def test_offsets_accumulate_year_lengths():
    table = load_default_table()
    cache = get_default_cache()
    assert cache.entry(2001).days_from_reference == table.year_length(2000)
    assert cache.entry(1999).days_from_reference == -table.year_length(1999)
    for year in range(1970, 2100):
        assert cache.entry(year + 1).days_from_reference - cache.entry(year).days_from_reference == table.year_length(year)


def test_month_start_offsets_are_prefix_sums():
    table = load_default_table()
    for year in table.years():
        offsets = get_default_cache().entry(year).month_start_offsets
        assert len(offsets) == 13
        assert offsets[0] == 0
        assert offsets[12] == table.year_length(year)
        assert all(a < b for a, b in zip(offsets, offsets[1:]))


def test_find_year_uses_half_open_intervals():
    cache = get_default_cache()
    start_2001 = cache.entry(2001).days_from_reference
    assert cache.find_year(start_2001).year == 2001
    assert cache.find_year(start_2001 - 1).year == 2000
    assert cache.find_year(0).year == 2000
    assert cache.find_year(-1).year == 1999
    assert cache.find_year(cache.entry(1970).days_from_reference - 1) is None


def test_complete_table_has_no_gaps():
    cache = get_default_cache()
    assert cache.is_complete
    assert cache.gaps == ()
    assert len(cache) == 131
    assert get_default_cache() is cache


def test_anchor_must_be_new_year():
    with pytest.raises(DataIntegrityError):
        YearCache.build(load_default_table(), ReferenceAnchor(bs_year=2000, ad_date=date(1943, 4, 15), bs_day=2))


def test_alternative_anchor_produces_same_conversions():
    anchor = ReferenceAnchor(bs_year=2081, ad_date=date(2024, 4, 13))
    converter = BikramSambatConverter(load_default_table(), anchor)
    default = get_default_converter()
    for value in (date(1913, 4, 13), date(1943, 4, 14), date(2000, 1, 1), date(2044, 4, 12)):
        assert converter.to_bs(value) == default.to_bs(value)


def test_gap_is_flagged_and_logged(caplog):
    with caplog.at_level(logging.WARNING, logger="bikram_sambat.api.year_cache"):
        cache = YearCache.build(table_without(2050, 1990))
    assert cache.gaps == (1990, 2050)
    assert not cache.is_complete
    assert cache.entry(2050) is None
    assert cache.entry(2049).crosses_gap is False
    assert cache.entry(2051).crosses_gap is True
    assert cache.entry(1991).crosses_gap is False
    assert cache.entry(1989).crosses_gap is True
    assert "1990, 2050" in caplog.text


def test_years_before_gap_still_convert_exactly():
    converter = BikramSambatConverter(table_without(2050))
    assert converter.to_ad(2049, 12, 1) == get_default_converter().to_ad(2049, 12, 1)
    assert converter.to_bs(date(1943, 4, 14)) == BSDate(2000, 1, 1)


@pytest.mark.parametrize("value", [(2050, 1, 1), (2051, 1, 1), (2090, 5, 10)])
def test_years_in_or_past_gap_fail_to_convert_to_ad(value):
    converter = BikramSambatConverter(table_without(2050))
    with pytest.raises(DataIntegrityError):
        converter.to_ad(*value)


def test_dates_past_gap_require_approximation():
    converter = BikramSambatConverter(table_without(2050))
    with pytest.raises(ApproximationRequired):
        converter.to_bs(date(2000, 1, 1))

    result = converter.convert_to_bs(date(2000, 1, 1))
    assert result.approximate is True
    # exact answer is 2056-09-17
    assert (result.date.year, result.date.month) == (2056, 9)
    assert converter.is_valid_bs_date(result.date.year, result.date.month, result.date.day)


def test_dates_before_backward_gap_require_approximation():
    converter = BikramSambatConverter(table_without(1990))
    result = converter.convert_to_bs(date(1920, 6, 1))
    assert result.approximate is True
    assert result.date.year == 1977
    exact = converter.convert_to_bs(date(1943, 4, 14))
    assert exact.approximate is False
    assert exact.date == BSDate(2000, 1, 1)


def test_nominal_bounds_match_exact_bounds_for_complete_table():
    cache = get_default_cache()
    assert cache.nominal_min_ad_date == cache.min_ad_date == date(1913, 4, 13)
    assert cache.nominal_max_ad_date == cache.max_ad_date == date(2044, 4, 12)


def test_last_table_year_after_forward_gap_is_approximated():
    converter = BikramSambatConverter(table_without(2050))
    assert converter.max_ad_date < date(2044, 1, 1) <= converter.cache.nominal_max_ad_date
    with pytest.raises(ApproximationRequired):
        converter.to_bs(date(2044, 1, 1))

    result = converter.convert_to_bs(date(2044, 1, 1))
    assert result.approximate is True
    assert result.date.year == 2100
    assert converter.is_valid_bs_date(result.date.year, result.date.month, result.date.day)


def test_first_table_year_before_backward_gap_is_approximated():
    converter = BikramSambatConverter(table_without(1990))
    assert converter.cache.nominal_min_ad_date <= date(1913, 6, 1) < converter.min_ad_date

    result = converter.convert_to_bs(date(1913, 6, 1))
    assert result.approximate is True
    assert result.date.year == 1970


@pytest.mark.parametrize("gap,value", [(2050, date(2045, 1, 1)), (1990, date(1900, 1, 1))])
def test_dates_beyond_widened_bounds_stay_out_of_range(gap, value):
    converter = BikramSambatConverter(table_without(gap))
    with pytest.raises(YearOutOfRangeError):
        converter.convert_to_bs(value)
