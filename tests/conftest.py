"""Pytest configuration and fixtures."""

from datetime import date, timedelta

import matplotlib
import pytest

from models.plan import default_document

matplotlib.use("Agg")

TODAY = date(2026, 1, 15)


def _target_in(years: float, today: date = TODAY) -> str:
    return (today + timedelta(days=round(years * 365.25))).isoformat()


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def target_in():
    """ISO date `years` after the fixed test date."""
    return _target_in


@pytest.fixture
def make_goal():
    def _make(id="g1", years=10, target_amount=1_000_000, inflation_rate=0,
              goal_type="one-time", today=TODAY, **extra):
        goal = {
            "id":             id,
            "name":           extra.pop("name", f"Goal {id}"),
            "goal_type":      goal_type,
            "target_amount":  target_amount,
            "inflation_rate": inflation_rate,
            "target_date":    _target_in(years, today),
            "start_date":     today.isoformat(),
            "linked_assets":  [],
        }
        goal.update(extra)
        return goal
    return _make


@pytest.fixture
def make_asset():
    def _make(id, category, value, name=None):
        return {"id": id, "name": name or id, "category": category, "value": value}
    return _make


@pytest.fixture
def make_document():
    def _make(assets=(), goals=(), income=(), settings=None):
        doc = default_document()
        doc["assets"]["items"] = list(assets)
        doc["goals"] = list(goals)
        doc["cashflow"]["income"] = list(income)
        if settings:
            doc["settings"].update(settings)
        return doc
    return _make
