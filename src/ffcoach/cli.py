"""Command-line interface for generating a weekly coach report."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path

from ffcoach.client import EspnClient
from ffcoach.config import LeagueSettings, iter_rules, load_settings
from ffcoach.config_loader import LeagueProfile
from ffcoach.dashboard import build_coach_report
from ffcoach.errors import FFCoachError
from ffcoach.models import CoachReport


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build a start/sit coach report for an ESPN league")
    parser.add_argument("--week", type=int, default=None, help="Scoring week (defaults to the current week)")
    parser.add_argument("--team", type=int, default=None, help="Fantasy team id (defaults to FFCOACH_TEAM_ID)")
    parser.add_argument(
        "--risk",
        type=float,
        default=50.0,
        help="Risk appetite 0-100; 50 is neutral",
    )
    parser.add_argument("--live", action="store_true", help="Blend live actuals into projections")
    parser.add_argument("--league-id", type=int, default=None, help="ESPN league id")
    parser.add_argument("--season", type=int, default=None, help="Season year")
    parser.add_argument(
        "--format",
        dest="lineup_format",
        type=str.upper,
        choices=[rules.lineup_format for rules in iter_rules()],
        default=None,
        help="Starting lineup format",
    )
    parser.add_argument("--summary", action="store_true", help="Request the narrative summary")
    parser.add_argument("--output", type=Path, default=None, help="Optional path to write the report JSON")
    parser.add_argument("--load-profile", type=Path, help="Load league profile JSON", default=None)
    parser.add_argument("--save-profile", type=Path, help="Save league profile JSON", default=None)
    parser.add_argument("--verbose", action="store_true", help="Enable info logging")
    return parser.parse_args()


def _resolve_settings(args: argparse.Namespace) -> LeagueSettings:
    settings = load_settings()
    if args.load_profile:
        profile = LeagueProfile.load(args.load_profile)
        settings = settings.with_overrides(
            league_id=profile.league_id,
            season_id=profile.season_id,
            team_id=profile.team_id,
            lineup_format=profile.lineup_format,
        )
    return settings.with_overrides(
        league_id=args.league_id,
        season_id=args.season,
        team_id=args.team,
        lineup_format=args.lineup_format,
    )


async def _run(settings: LeagueSettings, args: argparse.Namespace) -> CoachReport:
    async with EspnClient(settings) as client:
        return await build_coach_report(
            client,
            week=args.week,
            risk=args.risk,
            live=args.live,
            summarize=args.summary,
        )


def _print_report(report: CoachReport) -> None:
    brief = report.brief
    mode = "live" if brief.live else "pregame"
    print(f"Week {brief.week}: {brief.team_name} vs {brief.opponent_name} ({mode}, risk {brief.risk:.0f})")
    for bullet in brief.summary_bullets:
        print(f"- {bullet}")
    if report.summary is not None:
        print()
        print(report.summary.headline)
        for bullet in report.summary.bullets:
            print(f"  * {bullet}")
        for move in report.summary.moves:
            reason = f" ({move.reason})" if move.reason else ""
            print(f"  > {move.label}{reason}")
    elif report.summary_error:
        print(f"Summary unavailable: {report.summary_error}")


def main() -> None:
    args = _parse_args()
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    settings = _resolve_settings(args)
    if args.save_profile:
        LeagueProfile(
            league_id=settings.league_id,
            season_id=settings.season_id,
            team_id=settings.team_id,
            lineup_format=settings.lineup_format,
        ).save(args.save_profile)
        print(f"Saved league profile to {args.save_profile}")

    try:
        report = asyncio.run(_run(settings, args))
    except FFCoachError as exc:
        raise SystemExit(f"Coach report failed: {exc}") from exc

    _print_report(report)
    if args.output:
        args.output.write_text(
            json.dumps(report.model_dump(mode="json", by_alias=True), indent=2),
            encoding="utf-8",
        )
        print(f"Wrote coach report to {args.output}")


if __name__ == "__main__":
    main()
