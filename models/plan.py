# models/plan.py — Plan document shape, defaults and tolerant accessors
#
# The plan document is a plain JSON-shaped dict:
#   {settings, cashflow: {income, expenses}, assets: {items},
#    liabilities: {items}, goals}
# Every accessor here tolerates missing keys, None and malformed numbers.

import copy
import math
from dataclasses import dataclass, asdict
from typing import Optional

from config import DEFAULT_SETTINGS, EPF_RETURN, NPS_RETURN


RETIREMENT = "retirement"
ONE_TIME   = "one-time"


def default_document() -> dict:
    """Fresh document populated with default settings and empty collections."""
    return {
        "settings":    copy.deepcopy(DEFAULT_SETTINGS),
        "cashflow":    {"income": [], "expenses": []},
        "assets":      {"items": []},
        "liabilities": {"items": []},
        "goals":       [],
    }


def num(value, default: float = 0.0) -> float:
    """Coerce to float; None, junk and NaN become `default`."""
    try:
        out = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(out):
        return default
    return out


# ─────────────────────────────────────────────────────────────────────────────
# COLLECTION ACCESSORS
# ─────────────────────────────────────────────────────────────────────────────

def get_goals(document) -> list:
    if not isinstance(document, dict):
        return []
    goals = document.get("goals")
    return [g for g in goals if isinstance(g, dict)] if isinstance(goals, list) else []


def get_assets(document) -> list:
    if not isinstance(document, dict):
        return []
    assets = document.get("assets")
    items = assets.get("items") if isinstance(assets, dict) else None
    return [a for a in items if isinstance(a, dict)] if isinstance(items, list) else []


def get_income(document) -> list:
    if not isinstance(document, dict):
        return []
    cashflow = document.get("cashflow")
    income = cashflow.get("income") if isinstance(cashflow, dict) else None
    return [i for i in income if isinstance(i, dict)] if isinstance(income, list) else []


def find_goal(document, goal_id) -> Optional[dict]:
    return next((g for g in get_goals(document) if g.get("id") == goal_id), None)


def find_asset(document, asset_id) -> Optional[dict]:
    return next((a for a in get_assets(document) if a.get("id") == asset_id), None)


def linked_assets(goal) -> list:
    links = goal.get("linked_assets") if isinstance(goal, dict) else None
    return [la for la in links if isinstance(la, dict)] if isinstance(links, list) else []


def linked_total(goal) -> float:
    """Total amount of holdings currently committed to `goal`."""
    return sum(num(la.get("amount")) for la in linked_assets(goal))


# ─────────────────────────────────────────────────────────────────────────────
# SETTINGS
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class Settings:
    """Return and allocation assumptions, all in percent."""
    equity_allocation:  float = DEFAULT_SETTINGS["equity_allocation"]
    equity_return:      float = DEFAULT_SETTINGS["equity_return"]
    debt_return:        float = DEFAULT_SETTINGS["debt_return"]
    arbitrage_return:   Optional[float] = DEFAULT_SETTINGS["arbitrage_return"]
    epf_return:         float = EPF_RETURN
    nps_return:         float = NPS_RETURN
    investment_step_up: float = DEFAULT_SETTINGS["investment_step_up"]
    fund_house:         str   = DEFAULT_SETTINGS["fund_house"]

    @classmethod
    def from_document(cls, document) -> "Settings":
        raw = document.get("settings") if isinstance(document, dict) else None
        raw = raw if isinstance(raw, dict) else {}
        defaults = cls()

        def pick(key):
            return num(raw.get(key), getattr(defaults, key))

        arbitrage = raw.get("arbitrage_return", defaults.arbitrage_return)
        return cls(
            equity_allocation  = pick("equity_allocation"),
            equity_return      = pick("equity_return"),
            debt_return        = pick("debt_return"),
            arbitrage_return   = None if arbitrage is None else num(arbitrage, defaults.arbitrage_return),
            epf_return         = pick("epf_return"),
            nps_return         = pick("nps_return"),
            investment_step_up = pick("investment_step_up"),
            fund_house         = str(raw.get("fund_house") or defaults.fund_house).lower(),
        )


# ─────────────────────────────────────────────────────────────────────────────
# RETIREMENT CONTRIBUTIONS
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class RetirementContributions:
    """Payroll retirement inputs: monthly EPF/NPS flows and accumulated corpora."""
    monthly_epf: float = 0.0
    monthly_nps: float = 0.0
    epf_corpus:  float = 0.0
    nps_corpus:  float = 0.0

    @property
    def total_monthly(self) -> float:
        return self.monthly_epf + self.monthly_nps

    @property
    def total_corpus(self) -> float:
        return self.epf_corpus + self.nps_corpus

    def to_dict(self) -> dict:
        out = asdict(self)
        out["total_monthly"] = self.total_monthly
        out["total_corpus"]  = self.total_corpus
        return out
