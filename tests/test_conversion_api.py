import importlib

import pytest

from bikram_sambat import boot
from bikram_sambat.api import conversion
from bikram_sambat.api.exceptions import InvalidDateError, YearOutOfRangeError


@pytest.fixture
def preferences():
    module = importlib.import_module("bikram_sambat.api.preferences")
    return importlib.reload(module)


def test_convert_to_bs_payload():
    payload = conversion.convert_to_bs("2024-10-19")
    assert payload == {
        "year": 2081,
        "month": 7,
        "day": 3,
        "iso": "2081-07-03",
        "month_name": "Kartik",
        "month_name_ne": "कार्तिक",
        "approximate": False,
    }


def test_convert_to_ad_payload():
    payload = conversion.convert_to_ad("२०८१-०१-०१")
    assert payload["iso"] == "2024-04-13"
    assert payload["weekday"] == "Saturday"


def test_conversion_errors_propagate_without_frappe():
    with pytest.raises(YearOutOfRangeError):
        conversion.convert_to_bs("1900-01-01")
    with pytest.raises(InvalidDateError):
        conversion.convert_to_ad("2081-13-01")


def test_month_calendar():
    payload = conversion.get_month_calendar("2081", "1")
    assert payload == {
        "year": 2081,
        "month": 1,
        "month_name": "Baishakh",
        "days_in_month": 31,
        "first_weekday": 6,
        "ad_start": "2024-04-13",
        "ad_end": "2024-05-13",
    }


def test_supported_range():
    assert conversion.get_supported_range() == {
        "min_year": 1970,
        "max_year": 2100,
        "min_ad_date": "1913-04-13",
        "max_ad_date": "2044-04-12",
    }


def test_format_for_user_uses_preferences(preferences):
    assert conversion.format_for_user("2024-04-13", "short", user="hari@example.com") == "2024-04-13"
    preferences.set_user_preference("language", "ne", user="hari@example.com")
    assert conversion.format_for_user("2024-04-13", "full", user="hari@example.com") == "२०८१ बैशाख १"


def test_boot_session_injects_context(preferences):
    bootinfo = {}
    boot.boot_session(bootinfo)
    context = bootinfo["bikram_sambat"]
    assert context["date_system"] == "ad"
    assert context["supported_range"]["max_year"] == 2100


def test_boot_session_supports_attribute_payloads(preferences):
    class BootInfo:
        pass

    bootinfo = BootInfo()
    boot.boot_session(bootinfo)
    assert bootinfo.bikram_sambat["language"] == "en"
