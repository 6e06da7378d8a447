"""Tests for the time-value-of-money layer."""

from datetime import date

import pytest

from planner.calculator import (
    years_remaining, months_remaining, inflation_adjusted, lumpsum_fv,
    sip_fv, regular_sip, step_up_future_value, step_up_sip,
)


class TestTimeRemaining:
    def test_future_date(self, today, target_in):
        assert years_remaining(target_in(10), today) == pytest.approx(10, abs=0.01)
        assert months_remaining(target_in(10), today) == 120

    def test_past_date_is_zero(self, today):
        assert years_remaining("2020-01-01", today) == 0
        assert months_remaining("2020-01-01", today) == 0

    def test_date_objects(self):
        years = years_remaining(date(2027, 1, 15), date(2026, 1, 15))
        assert years == pytest.approx(365 / 365.25)

    @pytest.mark.parametrize("bad", [None, "", "not a date", "2026-13-45"])
    def test_missing_or_bad_date_is_zero(self, today, bad):
        assert years_remaining(bad, today) == 0
        assert months_remaining(bad, today) == 0

    def test_one_month_goal(self, today, target_in):
        assert months_remaining(target_in(1 / 12), today) == 1


class TestLumpSums:
    def test_inflation_six_percent_ten_years(self):
        assert inflation_adjusted(100000, 6, 10) == pytest.approx(179085, abs=1)

    def test_inflation_no_time(self):
        assert inflation_adjusted(100000, 6, 0) == 100000
        assert inflation_adjusted(100000, 6, -2) == 100000

    def test_lumpsum_monthly_compounding(self):
        assert lumpsum_fv(100000, 12, 1) == pytest.approx(100000 * 1.01 ** 12)

    def test_lumpsum_degenerate(self):
        assert lumpsum_fv(1000, 12, 0) == 1000
        assert lumpsum_fv(0, 12, 5) == 0
        assert lumpsum_fv(-5, 12, 5) == -5


class TestRegularSip:
    def test_ten_lakh_in_ten_years_at_twelve_percent(self):
        assert regular_sip(1_000_000, 12, 120) == pytest.approx(4347, abs=1)

    def test_zero_rate_is_simple_division(self):
        assert regular_sip(120000, 0, 12) == 10000

    def test_zero_target_or_months(self):
        assert regular_sip(0, 12, 120) == 0
        assert regular_sip(-100, 12, 120) == 0
        assert regular_sip(100000, 12, 0) == 0

    def test_inverse_of_sip_fv(self):
        payment = regular_sip(2_500_000, 9, 84)
        assert sip_fv(payment, 9, 84) == pytest.approx(2_500_000)

    def test_standard_sip_fv(self):
        assert sip_fv(10000, 12, 12) == pytest.approx(126825.03, abs=0.01)

    def test_linear_in_target(self):
        assert regular_sip(2_000_000, 10, 60) == pytest.approx(2 * regular_sip(1_000_000, 10, 60))

    def test_higher_return_needs_less(self):
        assert regular_sip(1_000_000, 12, 60) < regular_sip(1_000_000, 6, 60)


class TestStepUpFutureValue:
    def test_blocks_at_zero_rate(self):
        # 12 × 1000 then 12 × 1100
        assert step_up_future_value(1000, 0, 24, 0.10) == pytest.approx(25200)

    def test_short_final_block(self):
        assert step_up_future_value(1000, 0, 18, 0.10) == pytest.approx(18600)

    def test_last_payment_does_not_compound(self):
        assert step_up_future_value(100, 0.01, 2, 0) == pytest.approx(201)

    def test_no_step_up_matches_level_sip(self):
        assert step_up_future_value(1000, 0.01, 36, 0) == pytest.approx(sip_fv(1000, 12, 36))

    def test_degenerate(self):
        assert step_up_future_value(0, 0.01, 12, 0.1) == 0
        assert step_up_future_value(1000, 0.01, 0, 0.1) == 0


class TestStepUpSip:
    def test_zero_step_up_is_regular(self):
        assert step_up_sip(1_000_000, 12, 120, 0) == regular_sip(1_000_000, 12, 120)

    def test_degenerate(self):
        assert step_up_sip(0, 12, 120, 10) == 0
        assert step_up_sip(1_000_000, 12, 0, 10) == 0

    def test_zero_rate(self):
        # P × 12 + P × 1.1 × 12 = 120000
        payment = step_up_sip(120000, 0, 24, 10)
        assert payment == pytest.approx(120000 / 25.2, abs=0.05)
        assert step_up_future_value(payment, 0, 24, 0.10) >= 120000 - 0.01

    def test_higher_step_up_lowers_starting_sip(self):
        sips = [step_up_sip(5_000_000, 10, 180, s) for s in (0, 5, 10, 15)]
        assert sips == sorted(sips, reverse=True)

    @pytest.mark.parametrize("step_up", [0, 5, 10, 20])
    @pytest.mark.parametrize("years", [1, 10, 25, 40])
    def test_never_underfunds(self, step_up, years):
        target, rate, months = 5_000_000, 12, years * 12
        payment = step_up_sip(target, rate, months, step_up)
        fv = step_up_future_value(payment, rate / 1200, months, step_up / 100)
        assert fv >= target - 0.01
        assert payment <= regular_sip(target, rate, months) + 0.01
