import math

import pytest

from ffcoach.coach.scoring import clamp_risk, live_projection_basis, matchup_multiplier, risk_adjusted_projection, risk_tilt
from ffcoach.models import PlayerCard


def test_neutral_inputs_return_projection_exactly():
    assert risk_adjusted_projection(10.0) == 10.0
    assert risk_adjusted_projection(17.3, None, 50, 0) == 17.3


def test_matchup_multiplier_endpoints():
    assert matchup_multiplier(1) == pytest.approx(0.90)
    assert matchup_multiplier(32) == pytest.approx(1.10)
    assert matchup_multiplier(None) == 1.0
    assert matchup_multiplier(0) == 1.0
    assert matchup_multiplier(33) == 1.0


def test_multiplier_increases_with_softer_opponent():
    values = [risk_adjusted_projection(10.0, rank) for rank in range(1, 33)]
    assert values == sorted(values)
    assert values[0] < values[-1]


def test_risk_tilt_range():
    assert risk_tilt(0) == pytest.approx(0.85)
    assert risk_tilt(50) == 1.0
    assert risk_tilt(100) == pytest.approx(1.15)


def test_out_of_range_risk_is_clamped():
    assert risk_adjusted_projection(10.0, 16, 150) == risk_adjusted_projection(10.0, 16, 100)
    assert risk_adjusted_projection(10.0, 16, -20) == risk_adjusted_projection(10.0, 16, 0)
    assert clamp_risk(150) == 100.0
    assert clamp_risk(float("nan")) == 50.0
    assert clamp_risk("aggressive") == 50.0


def test_higher_risk_never_lowers_positive_projection():
    values = [risk_adjusted_projection(12.0, 10, risk) for risk in range(0, 101, 10)]
    assert values == sorted(values)


def test_variance_tilt_scales_with_risk():
    assert risk_adjusted_projection(10.0, None, 100, 1.0) == pytest.approx(10.0 * 1.15 * 1.1)
    assert risk_adjusted_projection(10.0, None, 50, 3.0) == 10.0


def test_non_finite_inputs_do_not_raise():
    assert risk_adjusted_projection(float("nan")) == 0.0
    assert risk_adjusted_projection(None) == 0.0
    assert risk_adjusted_projection(10.0, float("inf")) == 10.0
    assert math.isfinite(risk_adjusted_projection(10.0, 5, 70, float("nan")))


def test_live_projection_basis_floors_at_actual():
    card = PlayerCard(id=1, name="Hot Start", position="RB", projected_points=10.0, actual_points=18.0)
    assert live_projection_basis(card) == 18.0
    cold = card.model_copy(update={"actual_points": 2.0})
    assert live_projection_basis(cold) == 10.0
