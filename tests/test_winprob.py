import pytest

from ffcoach.coach import compute_win_probability, matchup_win_probability
from ffcoach.ingest import normalize_weekly

from tests import league_data


@pytest.fixture
def dto():
    return normalize_weekly(league_data.weekly_bundle(), league_data.teams())


def test_even_matchup_is_a_coin_flip():
    assert compute_win_probability(0, 0, 0, 0) == pytest.approx(0.5)
    assert compute_win_probability(50, 50, 40, 40) == pytest.approx(0.5)


def test_probability_is_clamped():
    assert compute_win_probability(140, 60, 0, 0) == 0.99
    assert compute_win_probability(60, 140, 0, 0) == 0.01


def test_probability_is_symmetric():
    p = compute_win_probability(80, 72, 20, 30)
    assert p + compute_win_probability(72, 80, 30, 20) == pytest.approx(1.0)
    assert 0.5 < p < 0.99


def test_remaining_projection_tilts_toward_favorite():
    assert compute_win_probability(0, 0, 100, 80) > 0.5


def test_pregame_matchup_probability(dto):
    result = matchup_win_probability(dto, 3, 1)

    assert result is not None
    assert result.key == "Gridiron Gurus vs Blitz Brigade"
    assert result.home_proj == pytest.approx(101.0)
    assert result.away_proj == pytest.approx(97.0)
    assert result.p_home > 0.5
    assert result.p_home + result.p_away == pytest.approx(1.0)
    assert result.value == round(result.p_home * 100)


def test_live_matchup_uses_live_projections(dto):
    result = matchup_win_probability(dto, 3, 2, live=True)

    assert result.home_proj == pytest.approx(101.5)
    assert result.away_proj == pytest.approx(98.0)


def test_first_matchup_without_team(dto):
    assert matchup_win_probability(dto, 3).home_team == "Gridiron Gurus"
    assert matchup_win_probability(dto, 4).away_team == "Third Team"


def test_missing_matchup_returns_none(dto):
    assert matchup_win_probability(dto, 3, 99) is None
    assert matchup_win_probability(dto, 8) is None
