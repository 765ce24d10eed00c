import pytest

from ffcoach.coach import BenchFlagPartition, build_coach_brief, build_implied_dvp, opponent_position_ranks
from ffcoach.coach.brief import NO_MATCHUP_BULLET
from ffcoach.dashboard import coach_brief_for
from ffcoach.config import DEFAULT_RULES
from ffcoach.ingest import normalize_weekly
from ffcoach.models import FantasyDataDTO, MatchupDTO, PlayerCard, TeamSide

from tests import league_data


@pytest.fixture
def dto():
    return normalize_weekly(league_data.weekly_bundle(), league_data.teams())


def _brief(dto, *, team_id=1, week=3, risk=50, live=False):
    return coach_brief_for(dto, week=week, team_id=team_id, risk=risk, live=live, rules=DEFAULT_RULES)


def test_no_matchup_brief():
    empty = FantasyDataDTO(week=3)

    brief = build_coach_brief(empty, [], 3, 1, 50, False, {})

    assert brief.team_name == "Unknown"
    assert brief.opponent_name == "Unknown"
    assert brief.summary_bullets == ["No matchup found for this team/week."]
    assert brief.summary_bullets == [NO_MATCHUP_BULLET]
    assert brief.start_sit == []
    assert brief.streamers == []
    assert brief.mismatches == []


def test_brief_names_and_flags(dto):
    brief = _brief(dto, risk=150)

    assert brief.week == 3
    assert brief.team_name == "Gridiron Gurus"
    assert brief.opponent_name == "Blitz Brigade"
    assert brief.risk == 100.0
    assert brief.live is False


def test_away_team_perspective(dto):
    brief = _brief(dto, team_id=2)

    assert brief.team_name == "Blitz Brigade"
    assert brief.opponent_name == "Gridiron Gurus"
    assert [item.position for item in brief.streamers] == ["QB", "K", "D/ST"]


def test_start_sit_suggests_better_bench_player(dto):
    brief = _brief(dto)

    assert len(brief.start_sit) == DEFAULT_RULES.starter_cutoff
    assert all(item.delta >= 0 for item in brief.start_sit)
    by_name = {item.current.name: item for item in brief.start_sit}
    slow = by_name["Slow Back"]
    assert slow.alternative is not None
    assert slow.alternative.name == "Bench Back"
    assert slow.delta == pytest.approx(slow.alternative.risk_adj_proj - slow.current.risk_adj_proj)
    assert by_name["Deep Threat"].alternative is None
    assert by_name["Deep Threat"].delta == 0.0
    assert by_name["Ace Passer"].current.injury == "QUESTIONABLE"


def test_mismatches_sorted_by_magnitude(dto):
    brief = _brief(dto)

    assert [item.position for item in brief.mismatches] == ["RB", "QB", "TE", "D/ST", "WR", "K"]
    top = brief.mismatches[0]
    assert top.you == pytest.approx(31.0)
    assert top.opp == pytest.approx(19.0)
    assert top.delta == pytest.approx(12.0)


def test_streamers_for_tough_matchups(dto):
    brief = _brief(dto)

    assert [item.position for item in brief.streamers] == ["QB", "K", "D/ST"]
    assert all(item.expected_gain == 2.0 for item in brief.streamers)


def test_streamers_skip_soft_or_unranked_matchups(dto):
    brief = build_coach_brief(dto, dto.teams, 3, 1, 50, False, {"QB": 20, "K": 8})
    assert [item.position for item in brief.streamers] == ["K"]


def test_summary_bullets_order(dto):
    brief = _brief(dto)

    assert brief.summary_bullets == [
        "Start **Bench Back** over **Slow Back** at RB (+3.7 rAdj pts).",
        "Start **Bench Back** over **Fast Back** at RB (+0.9 rAdj pts).",
        "Exploit RB: you +12.0 vs opp.",
        "Consider a QB streamer; tough matchup for your starter.",
    ]


def test_negative_mismatch_bullet(dto):
    brief = _brief(dto, team_id=2)
    assert "Shore up RB: you -12.0 vs opp." in brief.summary_bullets


def test_matchups_filtered_by_week(dto):
    week_four = _brief(dto, week=4)
    assert week_four.opponent_name == "Third Team"

    week_five = _brief(dto, week=5)
    assert week_five.summary_bullets == [NO_MATCHUP_BULLET]


def test_neutral_ranks_keep_projection(dto):
    brief = build_coach_brief(dto, dto.teams, 3, 1, 50, False, {})
    for item in brief.start_sit:
        assert item.current.risk_adj_proj == item.current.proj


def _single_matchup(roster):
    home = TeamSide(team_id=1, name="Home", roster=roster)
    away = TeamSide(team_id=2, name="Away")
    return FantasyDataDTO(week=1, matchups=[MatchupDTO(week=1, home=home, away=away)])


def test_bench_flag_partition_uses_slot_flags():
    roster = [
        PlayerCard(id=1, name="Bench Star", position="WR", projected_points=20.0, bench=True),
        PlayerCard(id=2, name="Starter", position="WR", projected_points=8.0),
    ]
    dto = _single_matchup(roster)

    brief = build_coach_brief(dto, [], 1, 1, 50, False, {}, partition=BenchFlagPartition())

    assert [item.current.name for item in brief.start_sit] == ["Starter"]
    assert brief.start_sit[0].alternative.name == "Bench Star"
    assert brief.team_name == "Home"


def test_live_mode_uses_banked_points():
    roster = [
        PlayerCard(id=1, name="Hot Starter", position="RB", projected_points=10.0, actual_points=18.0),
        PlayerCard(id=2, name="Bench Back", position="RB", projected_points=12.0, bench=True),
    ]
    dto = _single_matchup(roster)

    pregame = build_coach_brief(dto, [], 1, 1, 50, False, {}, partition=BenchFlagPartition())
    live = build_coach_brief(dto, [], 1, 1, 50, True, {}, partition=BenchFlagPartition())

    assert pregame.start_sit[0].alternative is not None
    assert live.start_sit[0].alternative is None
    assert live.start_sit[0].current.proj == 18.0
    assert live.live is True


def test_opponent_ranks_drive_multiplier(dto):
    ranks = build_implied_dvp(dto, 3)
    opponent = opponent_position_ranks(dto, ranks, 3, 1)
    brief = build_coach_brief(dto, dto.teams, 3, 1, 50, False, opponent)

    qb = brief.start_sit[0]
    # opponent rank 3 of 32 at QB is a tough draw
    assert qb.current.risk_adj_proj < qb.current.proj
