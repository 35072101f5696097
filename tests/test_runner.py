"""
Tests for the Monte Carlo runner and the end-to-end simulation.
"""
import math

import numpy as np
import pytest

from core.config import LoanTerms, RiskParameters, SimulationInputs
from core.schema import AmortizationMethod
from distributions.prng import Mulberry32
from engine.cashflow import build_schedule
from engine.runner import run_monte_carlo, simulate_credit_decision
from pm.metrics import percentile


def make_inputs(
    rate=18.0,
    discount=12.0,
    pd_annual=0.0,
    lgd=0.0,
    delay_prob=0.0,
    delay_months=0,
    iterations=500,
    seed=42,
    method=AmortizationMethod.PRICE,
    grace=0,
    principal=100000.0,
    term=24,
):
    return SimulationInputs(
        loan=LoanTerms(principal, term, rate, method, grace),
        risk=RiskParameters(
            pd_annual_pct=pd_annual,
            lgd_pct=lgd,
            delay_prob_pct=delay_prob,
            delay_months=delay_months,
            iterations=iterations,
            seed=seed,
        ),
        discount_annual_pct=discount,
    )


@pytest.mark.unit
class TestNoRisk:
    """With no default and no delay every path is the base schedule."""

    def test_samples_equal_base_positive(self):
        result = simulate_credit_decision(make_inputs(rate=18.0, discount=12.0))
        assert result.base.npv > 0
        assert np.all(result.mc.npvs == result.base.npv)
        assert result.mc.prob_negative_npv == 0.0
        for value in (result.mc.p5, result.mc.p50, result.mc.p95):
            assert value == pytest.approx(result.base.npv, rel=1e-12)

    def test_samples_equal_base_negative(self):
        result = simulate_credit_decision(make_inputs(rate=12.0, discount=18.0))
        assert result.base.npv < 0
        assert np.all(result.mc.npvs == result.base.npv)
        assert result.mc.prob_negative_npv == 1.0

    def test_fair_loan_scenario(self):
        """100k over 12 months at 12%, discounted at 12%: NPV ~ 0, IRR ~ 12%."""
        result = simulate_credit_decision(
            make_inputs(rate=12.0, discount=12.0, term=12, iterations=200)
        )
        assert result.base.npv == pytest.approx(0.0, abs=1e-6)
        assert result.base.irr_annual == pytest.approx(0.12, abs=1e-6)
        assert np.all(result.mc.npvs == result.base.npv)
        expected = 1.0 if result.base.npv < 0 else 0.0
        assert result.mc.prob_negative_npv == expected


@pytest.mark.unit
class TestDeterminism:
    """Seeded runs replay exactly."""

    def test_same_seed_same_sample(self):
        inputs = make_inputs(pd_annual=20.0, lgd=60.0, delay_prob=10.0, delay_months=2, seed=7)
        r1 = simulate_credit_decision(inputs)
        r2 = simulate_credit_decision(inputs)
        np.testing.assert_array_equal(r1.mc.npvs, r2.mc.npvs)
        assert (r1.mc.p5, r1.mc.p50, r1.mc.p95) == (r2.mc.p5, r2.mc.p50, r2.mc.p95)
        assert r1.mc.prob_negative_npv == r2.mc.prob_negative_npv

    def test_injected_rng_matches_seed(self):
        inputs = make_inputs(pd_annual=20.0, lgd=60.0, delay_prob=10.0, delay_months=2, seed=7)
        r1 = simulate_credit_decision(inputs)
        r2 = simulate_credit_decision(inputs, rng=Mulberry32(7))
        np.testing.assert_array_equal(r1.mc.npvs, r2.mc.npvs)

    def test_different_seeds_differ(self):
        r1 = simulate_credit_decision(make_inputs(pd_annual=30.0, lgd=50.0, seed=1))
        r2 = simulate_credit_decision(make_inputs(pd_annual=30.0, lgd=50.0, seed=2))
        assert not np.array_equal(r1.mc.npvs, r2.mc.npvs)

    def test_unseeded_run_works(self):
        result = simulate_credit_decision(make_inputs(pd_annual=10.0, lgd=50.0, seed=None))
        assert len(result.mc.npvs) == 500
        assert np.all(np.isfinite(result.mc.npvs))


@pytest.mark.unit
class TestMonteCarloStatistics:
    """Distribution outputs."""

    def test_generation_order_preserved(self):
        result = simulate_credit_decision(make_inputs(pd_annual=40.0, lgd=70.0, iterations=1000))
        npvs = result.mc.npvs
        assert not np.array_equal(npvs, np.sort(npvs))
        ordered = np.sort(npvs)
        assert result.mc.p5 == percentile(ordered, 0.05)
        assert result.mc.p50 == percentile(ordered, 0.50)
        assert result.mc.p95 == percentile(ordered, 0.95)
        assert result.mc.p5 <= result.mc.p50 <= result.mc.p95
        assert result.mc.prob_negative_npv == pytest.approx(np.mean(npvs < 0))

    def test_certain_total_default(self):
        """PD=100% with full loss: every path loses the principal in month 1."""
        result = simulate_credit_decision(make_inputs(pd_annual=100.0, lgd=100.0, iterations=100))
        np.testing.assert_allclose(result.mc.npvs, -100000.0)
        assert result.mc.prob_negative_npv == 1.0
        assert result.mc.prob_default == 1.0

    def test_defaults_lower_npv(self):
        safe = simulate_credit_decision(make_inputs(iterations=300))
        risky = simulate_credit_decision(make_inputs(pd_annual=25.0, lgd=80.0, iterations=300))
        assert risky.mc.mean_npv < safe.mc.mean_npv
        assert 0.0 < risky.mc.prob_default < 1.0

    def test_certain_delay_flags_every_path(self):
        result = simulate_credit_decision(
            make_inputs(delay_prob=100.0, delay_months=3, iterations=100)
        )
        assert result.mc.prob_delay == 1.0
        assert np.all(result.mc.npvs < result.base.npv)

    def test_to_series(self):
        result = simulate_credit_decision(make_inputs(iterations=100))
        s = result.mc.to_series()
        assert s.name == "npv"
        assert len(s) == result.mc.iterations == 100


@pytest.mark.unit
class TestPreconditions:
    """Invalid configuration is rejected before the loop."""

    def test_zero_iterations(self):
        with pytest.raises(ValueError):
            simulate_credit_decision(make_inputs(iterations=0))

    def test_run_monte_carlo_override(self):
        schedule = build_schedule(1000.0, 12, 0.01, "PRICE", 0)
        with pytest.raises(ValueError):
            run_monte_carlo(schedule, RiskParameters(iterations=10), 0.01, Mulberry32(1), iterations=0)

    def test_run_monte_carlo_override_count(self):
        schedule = build_schedule(1000.0, 12, 0.01, "PRICE", 0)
        mc = run_monte_carlo(schedule, RiskParameters(iterations=10), 0.01, Mulberry32(1), iterations=3)
        assert mc.iterations == 3


@pytest.mark.unit
class TestOutputContract:
    """Plain-Python view of the result."""

    def test_to_dict_never_payback(self):
        result = simulate_credit_decision(make_inputs(rate=0.0, discount=12.0, iterations=100))
        out = result.to_dict()
        assert out["base"]["discounted_payback_months"] is None
        assert out["base"]["irr_annual"] == pytest.approx(0.0, abs=1e-6)
        assert len(out["mc"]["npvs"]) == 100
        assert isinstance(out["mc"]["npvs"][0], float)

    def test_to_dict_payback(self):
        result = simulate_credit_decision(make_inputs(iterations=100))
        out = result.to_dict()
        assert isinstance(out["base"]["discounted_payback_months"], int)
        assert not math.isnan(out["base"]["irr_annual"])

    def test_string_amortization_tag(self):
        inputs = SimulationInputs(
            loan=LoanTerms(100000.0, 12, 12.0, "SAC", 0),
            risk=RiskParameters(iterations=100, seed=1),
            discount_annual_pct=12.0,
        )
        result = simulate_credit_decision(inputs)
        assert result.schedule.amortization is AmortizationMethod.SAC
        assert result.to_dict()["base"]["npv"] == pytest.approx(0.0, abs=1e-6)
