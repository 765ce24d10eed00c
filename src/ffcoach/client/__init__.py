"""Remote league data clients."""

from .espn import EspnClient, LeagueBundle, gather_bundles

__all__ = ["EspnClient", "LeagueBundle", "gather_bundles"]
