import json
import logging
from decimal import Decimal

import pytest

from tally import JsonFormatter, Settings, setup_json_logging


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "TALLY_TAX_RATE",
        "TALLY_SERVICE_FEE_RATE",
        "TALLY_DELIVERY_TIP_CAP_CENTS",
        "TALLY_EDIT_WINDOW_SECONDS",
        "TALLY_STORE_LAT",
        "TALLY_STORE_LNG",
        "TALLY_TIP_PRESETS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings.from_env()
    assert settings.tax_rate == Decimal("0.0875")
    assert settings.service_fee_rate == 0
    assert settings.delivery_tip_cap_cents == 2000
    assert settings.edit_window_seconds == 180
    assert settings.tip_presets == (10, 15, 20)
    assert [z.fee_cents for z in settings.zone_table] == [299, 499, 799]


def test_overrides(monkeypatch):
    monkeypatch.setenv("TALLY_TAX_RATE", "0.06")
    monkeypatch.setenv("TALLY_EDIT_WINDOW_SECONDS", "300")
    monkeypatch.setenv("TALLY_TIP_PRESETS", "15, 18,22")
    monkeypatch.setenv("TALLY_STORE_LAT", "40.0")
    settings = Settings.from_env()
    assert settings.tax_rate == Decimal("0.06")
    assert settings.edit_window_seconds == 300
    assert settings.tip_presets == (15, 18, 22)
    assert settings.store.lat == 40.0


@pytest.mark.parametrize("raw", ["", "none", "None"])
def test_tip_cap_can_be_disabled(monkeypatch, raw):
    monkeypatch.setenv("TALLY_DELIVERY_TIP_CAP_CENTS", raw)
    assert Settings.from_env().tip_policy.delivery_cap_cents is None


@pytest.mark.parametrize(
    "name, raw",
    [
        ("TALLY_TAX_RATE", "eight percent"),
        ("TALLY_TAX_RATE", "-0.1"),
        ("TALLY_EDIT_WINDOW_SECONDS", "3m"),
        ("TALLY_TIP_PRESETS", "10,fifteen"),
        ("TALLY_DELIVERY_TIP_CAP_CENTS", "twenty"),
    ],
)
def test_malformed_values_name_the_variable(monkeypatch, name, raw):
    monkeypatch.setenv(name, raw)
    with pytest.raises(ValueError, match=name):
        Settings.from_env()


def test_json_formatter():
    record = logging.LogRecord("tally.tip", logging.INFO, __file__, 1, "tip %d capped", (4000,), None)
    data = json.loads(JsonFormatter().format(record))
    assert data["level"] == "INFO"
    assert data["logger"] == "tally.tip"
    assert data["message"] == "tip 4000 capped"


def test_setup_json_logging_sets_level():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    try:
        setup_json_logging("debug")
        assert root.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
    finally:
        root.handlers[:] = handlers
        root.setLevel(level)
