from typing import Optional


class UpstreamError(Exception):
    """A Sleeper request failed: transport error, non-2xx status or bad JSON."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class SeedLeagueError(Exception):
    """The league an aggregation starts from could not be loaded."""

    def __init__(self, league_id: str, cause: Optional[UpstreamError] = None):
        detail = f": {cause}" if cause else ""
        super().__init__(f"Could not load league {league_id}{detail}")
        self.league_id = league_id
        self.cause = cause


class SeasonNotFoundError(LookupError):
    """A requested season label is not part of the league's history."""

    def __init__(self, league_id: str, season: str):
        super().__init__(f"Season {season} not found in the history of league {league_id}")
        self.league_id = league_id
        self.season = season


class InvalidWeekRangeError(ValueError):
    """A week range whose start lies after its end."""

    def __init__(self, week_min: int, week_max: int):
        super().__init__(f"week_min ({week_min}) must not be greater than week_max ({week_max})")
        self.week_min = week_min
        self.week_max = week_max
