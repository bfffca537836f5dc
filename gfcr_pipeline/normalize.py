"""
Record normalization and program screening.

Every indicator sheet passes through normalize_records() before any
aggregation: the synthetic walkthrough round is dropped and reporting
dates become calendar dates. Programs that only ever entered targets
are removed from the working set up front so they cannot inflate
target totals.
"""

import logging
from typing import Dict, Iterable, List

import pandas as pd

from .config import (
    COL_DATA_TYPE,
    COL_PROJECT,
    COL_REPORTING_DATE,
    COL_TITLE,
    EXCLUDED_TITLES,
    REPORT,
)
from .models import ExclusionNotice

logger = logging.getLogger(__name__)


def normalize_records(df: pd.DataFrame) -> pd.DataFrame:
    """Drop known-bad report rounds and type the date column. Returns a copy."""
    out = df.copy()
    if COL_TITLE in out.columns:
        out = out[~out[COL_TITLE].isin(EXCLUDED_TITLES)].copy()
    if COL_REPORTING_DATE in out.columns:
        out[COL_REPORTING_DATE] = pd.to_datetime(out[COL_REPORTING_DATE]).dt.normalize()
    if COL_DATA_TYPE in out.columns:
        out[COL_DATA_TYPE] = out[COL_DATA_TYPE].astype(str).str.strip()
    return out


def find_programs_without_reports(tables: Dict[str, pd.DataFrame]) -> List[str]:
    """Programs present in any sheet that have no Report row in any sheet."""
    seen = set()
    reported = set()
    for name, df in tables.items():
        if COL_PROJECT not in df.columns or COL_DATA_TYPE not in df.columns:
            logger.warning(f"Sheet '{name}' has no {COL_PROJECT}/{COL_DATA_TYPE} columns, skipped in screening")
            continue
        clean = normalize_records(df)
        seen.update(clean[COL_PROJECT].dropna())
        reported.update(clean.loc[clean[COL_DATA_TYPE] == REPORT, COL_PROJECT].dropna())
    return sorted(seen - reported)


def exclude_programs(tables: Dict[str, pd.DataFrame], programs: Iterable[str]) -> Dict[str, pd.DataFrame]:
    """Return new tables without rows belonging to the given programs."""
    programs = set(programs)
    if not programs:
        return dict(tables)
    result = {}
    for name, df in tables.items():
        if COL_PROJECT in df.columns:
            result[name] = df[~df[COL_PROJECT].isin(programs)].copy()
        else:
            result[name] = df
    return result


def build_exclusion_notice(programs: List[str]) -> ExclusionNotice:
    """Log which programs were dropped (or confirm none were)."""
    notice = ExclusionNotice(excluded=list(programs))
    if notice.excluded:
        logger.warning(notice.message)
    else:
        logger.info(notice.message)
    return notice


def screen_programs(tables: Dict[str, pd.DataFrame]):
    """Exclude programs without any Report rows. Returns (tables, notice)."""
    missing = find_programs_without_reports(tables)
    notice = build_exclusion_notice(missing)
    return exclude_programs(tables, missing), notice
