"""
Data models for the GFCR progress pipeline.
Metric definitions are plain configuration; every summary row carries
its reported and target totals alongside the derived progress.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .config import COL_DATA_TYPE, COL_INDICATOR, COL_REPORTING_DATE, COL_TITLE


class GFCRPipelineError(Exception):
    """Base class for pipeline errors."""
    pass


class MissingTokenError(GFCRPipelineError):
    """Raised when the platform API token is not configured."""
    pass


class FetchError(GFCRPipelineError):
    """Raised when the reporting platform cannot be reached or refuses a request."""
    pass


class MetricSchemaError(GFCRPipelineError):
    """Raised when an indicator sheet lacks the columns a metric needs."""

    def __init__(self, metric: str, missing: List[str]):
        self.metric = metric
        self.missing = list(missing)
        super().__init__(f"{metric}: missing expected columns {self.missing}")


@dataclass
class MetricSpec:
    """Configuration for one reconciled impact metric."""
    response: str  # label used in the summary table
    sheet: str  # indicator sheet the records come from
    value_column: str
    group_key: Tuple[str, ...]
    indicator_pattern: Optional[str] = None  # regex matched against the indicator name
    scale: float = 1.0  # unit conversion applied to both totals
    row_filter: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    @property
    def required_columns(self) -> List[str]:
        cols = list(self.group_key) + [COL_TITLE, COL_REPORTING_DATE, COL_DATA_TYPE, self.value_column]
        if self.indicator_pattern is not None:
            cols.append(COL_INDICATOR)
        cols.extend(c for c in self.row_filter if c not in cols)
        return cols


@dataclass
class MetricSummary:
    """Reported and target totals for one metric."""
    response: str
    reported: float  # int for counted metrics
    target: float

    @property
    def progress(self) -> float:
        """Reported as a percentage of target; NaN when there is no target."""
        if not self.target:
            return math.nan
        return self.reported / self.target * 100.0

    def to_dict(self) -> dict:
        return {
            "Response": self.response,
            "Reported": self.reported,
            "Target": self.target,
            "Progress": self.progress,
        }


@dataclass
class ExclusionNotice:
    """Programs dropped from the run because they never submitted a report."""
    excluded: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        if not self.excluded:
            return "All programs have submitted at least one report; none excluded"
        names = ", ".join(self.excluded)
        return f"Excluded {len(self.excluded)} program(s) with no reported data: {names}"
