"""Error types and run diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional


class DataError(ValueError):
    """Raised when required upstream data is unusable."""


class MissingInputError(DataError):
    """Raised when a team or a required player field is absent."""

    def __init__(self, message: str, team_code: Optional[str] = None, problems: Optional[List[str]] = None):
        super().__init__(message)
        self.team_code = team_code
        self.problems = list(problems or [])


@dataclass(frozen=True)
class ConvergenceAssumptionViolation:
    """A team's minutes-weighted position average missed 3.0 after the fixed rounds."""

    team_code: str
    estimate: str  # "position" or "offensive_role"
    team_average: float
    tolerance: float

    @property
    def deviation(self) -> float:
        return self.team_average - 3.0

    def to_dict(self) -> dict:
        return {
            "team_code": self.team_code,
            "estimate": self.estimate,
            "team_average": self.team_average,
            "deviation": self.deviation,
            "tolerance": self.tolerance,
        }
