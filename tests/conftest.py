"""Shared fixtures for haulbook tests."""

import datetime as dt
from decimal import Decimal

import pytest
import structlog

from haulbook.core.config import OperatingCosts, reset_config
from haulbook.data.models.expense import Expense
from haulbook.data.models.load import Load
from haulbook.data.store import RecordStore

# Monday, inside the Wed Oct 14 - Tue Oct 20 2026 settlement cycle
NOW = dt.datetime(2026, 10, 19, 10, 0, 0)


def make_load(day: dt.date, miles: int, record_id: int = 0, **fields) -> Load:
    return Load(id=record_id or int(day.strftime("%Y%m%d")) * 10000 + miles, date=day, miles=miles, **fields)


def make_expense(day: dt.date, amount: str, category: str = "other", record_id: int = 0, **fields) -> Expense:
    return Expense(
        id=record_id or int(day.strftime("%Y%m%d")),
        date=day,
        category=category,
        amount=Decimal(amount),
        **fields,
    )


@pytest.fixture
def now() -> dt.datetime:
    return NOW


@pytest.fixture
def costs() -> OperatingCosts:
    return OperatingCosts()


@pytest.fixture
def store(tmp_path) -> RecordStore:
    return RecordStore(tmp_path / "records.json")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point configuration at an empty directory and drop cached config and logging setup."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("HAULBOOK_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("HAULBOOK_DATA_FILE", str(tmp_path / "default-records.json"))
    monkeypatch.delenv("HAULBOOK_INCLUDE_LEASE", raising=False)
    reset_config()
    yield config_dir
    reset_config()
    structlog.reset_defaults()
