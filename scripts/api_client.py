"""Lightweight REST client for the ffcoach API."""

from __future__ import annotations

import argparse
import json

import httpx


def build_params(args: argparse.Namespace) -> dict[str, str]:
    params: dict[str, str] = {}
    if args.week is not None:
        params["week"] = str(args.week)
    if args.team is not None:
        params["team"] = str(args.team)
    if args.live:
        params["live"] = "true"
    return params


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the ffcoach REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--week", type=int, default=None, help="Scoring week")
    parser.add_argument("--team", type=int, default=None, help="Fantasy team id")
    parser.add_argument("--risk", type=float, default=50.0, help="Risk appetite 0-100")
    parser.add_argument("--live", action="store_true", help="Use live scoring")
    parser.add_argument("--no-summary", action="store_true", help="Skip the narrative summary")
    parser.add_argument("--weekly", action="store_true", help="Print the normalized weekly data and exit")
    parser.add_argument("--win-probability", action="store_true", help="Print the matchup win probability and exit")
    args = parser.parse_args()

    params = build_params(args)
    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        if args.weekly:
            resp = client.get("/dashboard/weekly")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return
        if args.win_probability:
            resp = client.get("/dashboard/win-probability", params=params)
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            return

        params["risk"] = str(args.risk)
        params["summary"] = "false" if args.no_summary else "true"
        resp = client.get("/dashboard/coach", params=params)
        if resp.status_code == 502:
            raise SystemExit(f"upstream league fetch failed: {resp.json().get('detail')}")
        resp.raise_for_status()
        report = resp.json()
        brief = report["brief"]
        print(f"Week {brief['week']}: {brief['teamName']} vs {brief['opponentName']}")
        for bullet in brief["summaryBullets"]:
            print(f"- {bullet}")
        if report.get("summary"):
            print("Summary:", json.dumps(report["summary"], indent=2))
        elif report.get("summaryError"):
            print(f"Summary unavailable: {report['summaryError']}")


if __name__ == "__main__":
    main()
