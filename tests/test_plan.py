"""Tests for the full recompute and horizon-bucket roll-up."""

import pytest

from config import SHORT, LONG, FUND_HOUSES, GENERIC_FUNDS
from models.plan import Settings
from planner.plan import TABLE_COLUMNS, build_plan, fund_names, project_goals


@pytest.fixture
def document(make_document, make_asset, make_goal):
    return make_document(
        assets=[
            make_asset("fd", "FDs & RDs", 200000),
            make_asset("eq", "Equity Mutual Funds", 500000),
            make_asset("epf", "EPF Corpus", 1_000_000),
        ],
        goals=[
            make_goal("car", years=3, target_amount=800000, inflation_rate=5, name="Car"),
            make_goal("edu", years=12, target_amount=3_000_000, inflation_rate=8, name="Education"),
            make_goal("ret", years=25, target_amount=30_000_000, inflation_rate=6, name="Retirement",
                      goal_type="retirement", include_epf_nps=True),
        ],
        income=[{"id": "sal", "name": "Salary", "amount": 200000, "epf": 9000, "nps": 0}],
    )


class TestBuildPlan:
    def test_links_then_projects(self, document, today):
        plan = build_plan(document, today)
        assert plan["document"] is document

        car, edu, ret = plan["projections"]
        assert car["bucket"] == SHORT
        assert edu["bucket"] == LONG
        assert car["linked_amount"] == 200000
        assert edu["linked_amount"] == 500000
        assert ret["linked_amount"] == 0
        assert ret["epf_nps"] is not None
        assert ret["epf_nps"]["epf_corpus"] == 1_000_000
        assert ret["epf_nps"]["monthly_epf"] == 9000

    def test_table(self, document, today):
        table = build_plan(document, today)["table"]
        assert list(table.columns) == TABLE_COLUMNS
        assert list(table["goal_id"]) == ["car", "edu", "ret"]
        assert list(table["name"]) == ["Car", "Education", "Retirement"]

    def test_bucket_totals(self, document, today):
        plan = build_plan(document, today)
        table, buckets = plan["table"], plan["buckets"]

        short_sip = table.loc[table["bucket"] == SHORT, "monthly_sip"].sum()
        long_sip = table.loc[table["bucket"] == LONG, "monthly_sip"].sum()
        assert buckets[SHORT]["goals"] == 1
        assert buckets[LONG]["goals"] == 2
        assert buckets[SHORT]["total_sip"] == pytest.approx(short_sip)
        assert buckets[LONG]["total_sip"] == pytest.approx(long_sip)
        assert plan["total_sip"] == pytest.approx(table["monthly_sip"].sum())

    def test_fund_split(self, document, today):
        buckets = build_plan(document, today)["buckets"]
        short, long = buckets[SHORT], buckets[LONG]

        assert short["blended_return"] == 6
        assert short["allocation"] == {"arbitrage": short["total_sip"]}

        total = long["total_sip"]
        assert long["equity_allocation"] == 60
        assert long["debt_allocation"] == 40
        assert long["blended_return"] == pytest.approx(8.0)
        assert long["allocation"]["nifty50"] == pytest.approx(total * 0.6 * 0.7)
        assert long["allocation"]["nifty_next50"] == pytest.approx(total * 0.6 * 0.3)
        assert long["allocation"]["money_market"] == pytest.approx(total * 0.4)
        assert sum(long["allocation"].values()) == pytest.approx(total)

    def test_custom_settings(self, document, today):
        document["settings"].update({"equity_allocation": 80, "equity_return": 12,
                                     "arbitrage_return": None})
        plan = build_plan(document, today)
        assert plan["buckets"][LONG]["blended_return"] == pytest.approx(10.6)
        assert plan["buckets"][SHORT]["blended_return"] == 5
        assert plan["projections"][0]["blended_return"] == 5

    def test_step_up_lowers_sips(self, document, today):
        flat = build_plan(document, today)["total_sip"]
        stepped = build_plan(document, today, step_up=True)
        assert stepped["total_sip"] < flat
        assert all(p["annual_step_up"] == 5 for p in stepped["projections"])

    def test_allocations(self, document, today):
        alloc = build_plan(document, today)["allocations"]
        assert alloc["fd"]["available"] == 0
        assert alloc["eq"]["available"] == 0
        assert alloc["epf"]["available"] == 1_000_000

    def test_past_goals_left_out_of_buckets(self, document, make_goal, today):
        document["goals"].append(make_goal("old", years=-1, target_amount=400000))
        plan = build_plan(document, today)
        assert len(plan["table"]) == 4
        assert plan["buckets"][SHORT]["goals"] == 1
        assert plan["buckets"][SHORT]["total_target"] == pytest.approx(
            plan["projections"][0]["inflation_adjusted_target"])

    def test_fund_names_follow_fund_house(self, document, today):
        buckets = build_plan(document, today)["buckets"]
        icici = FUND_HOUSES["icici"]
        assert buckets[SHORT]["funds"] == {"arbitrage": icici["arbitrage"]}
        assert buckets[LONG]["funds"]["nifty50"] == icici["nifty50"]
        assert set(buckets[LONG]["funds"]) == set(buckets[LONG]["allocation"])

        document["settings"]["fund_house"] = "HDFC"
        buckets = build_plan(document, today)["buckets"]
        assert buckets[LONG]["funds"]["money_market"] == FUND_HOUSES["hdfc"]["money_market"]

    def test_empty_document(self, make_document, today):
        plan = build_plan(make_document(), today)
        assert plan["projections"] == []
        assert plan["table"].empty
        assert plan["total_sip"] == 0
        assert plan["buckets"][SHORT]["goals"] == 0
        assert plan["buckets"][LONG]["allocation"]["nifty50"] == 0

    def test_none_document(self, today):
        plan = build_plan(None, today)
        assert plan["document"] is None
        assert plan["total_sip"] == 0
        assert plan["allocations"] == {}


class TestSettings:
    def test_defaults(self):
        s = Settings.from_document({})
        assert s.fund_house == "icici"
        assert (s.equity_allocation, s.equity_return, s.debt_return, s.arbitrage_return) == (60, 10, 5, 6)
        assert (s.epf_return, s.nps_return) == (8, 9)

    def test_bad_values_fall_back(self):
        s = Settings.from_document({"settings": {"equity_return": "high", "debt_return": None}})
        assert s.equity_return == 10
        assert s.debt_return == 5

    def test_project_goals_uses_settings(self, make_document, make_goal, today):
        doc = make_document(goals=[make_goal(years=10)], settings={"equity_return": 14})
        p = project_goals(doc, today)[0]
        assert p["blended_return"] == pytest.approx(0.6 * 14 + 0.4 * 5)


def test_unknown_fund_house_uses_generic_names():
    assert fund_names("quant") == GENERIC_FUNDS
    assert fund_names(None) == GENERIC_FUNDS
