import logging

import pytest

from shared.helper.HelperConfig import HelperConfig


def _config(**env) -> HelperConfig:
    return HelperConfig(logger=logging.getLogger("dashboard.tests"), env=env)


def test_empty_string_counts_as_unset():
    config = _config(DASHBOARD_DATE_FORMAT="")

    assert config.get_string_val("DASHBOARD_DATE_FORMAT", default="%x") == "%x"
    with pytest.raises(ValueError, match="is not set"):
        config.get_string_val("DASHBOARD_DATE_FORMAT")


def test_keys_are_case_insensitive():
    assert _config(TIMEZONE=" UTC ").get_string_val("timezone") == "UTC"


@pytest.mark.parametrize("raw, expected", [("0", 0), ("7", 7), ("50", 10), ("-4", 0)])
def test_int_values_are_clamped(raw, expected):
    config = _config(DASHBOARD_MAX_BATCH_SIZE=raw)

    assert config.get_int_val("DASHBOARD_MAX_BATCH_SIZE", default=10, minimum=0, maximum=10) == expected


def test_int_value_rejects_fractions():
    with pytest.raises(ValueError, match="not a valid integer"):
        _config(DASHBOARD_PAGE_SIZE="12.5").get_int_val("DASHBOARD_PAGE_SIZE", default=12)


@pytest.mark.parametrize("raw, expected", [("true", True), ("1", True), ("YES", True), ("false", False), ("off", False)])
def test_bool_values(raw, expected):
    assert _config(DASHBOARD_DISCARD_STALE_SEARCH=raw).get_bool_val("DASHBOARD_DISCARD_STALE_SEARCH", default=False) is expected

