"""
Report/Target reconciliation.

Two steps shared by every reconciled metric:

  1. reduce_to_latest()   - keep the most recent record per
                            (group key, data type)
  2. reconcile_targets()  - make sure every group key that reported
                            progress also carries a target that is not
                            below what was achieved

Rules applied per group key by reconcile_targets():
  - no Report row          -> left as-is (a Target-only key stays Target-only)
  - Report, no Target      -> Target synthesized equal to Report
  - Report > Target        -> Target raised to Report
  - Report <= Target       -> unchanged
The Report value itself is never modified, and keys never interact.
"""

import logging
from typing import Sequence

import pandas as pd

from .config import COL_DATA_TYPE, COL_REPORTING_DATE, REPORT, TARGET

logger = logging.getLogger(__name__)


def reduce_to_latest(df: pd.DataFrame, keys: Sequence[str],
                     date_column: str = COL_REPORTING_DATE) -> pd.DataFrame:
    """Keep one row per (keys, data type): the one with the latest date.

    Ties on the date go to the row that comes last in input order
    (stable sort, keep="last"). Missing dates sort first so they never win.
    """
    subset = list(keys) + [COL_DATA_TYPE]
    ordered = df.sort_values(date_column, kind="mergesort", na_position="first")
    latest = ordered.drop_duplicates(subset=subset, keep="last")
    return latest.sort_index()


def reconcile_targets(df: pd.DataFrame, keys: Sequence[str], value_column: str) -> pd.DataFrame:
    """Apply the target reconciliation rules per group key.

    Expects at most one row per (keys, data type), as produced by
    reduce_to_latest(). Returns a long frame with columns
    keys + [data type, value_column], sorted by key.
    """
    keys = list(keys)
    columns = keys + [COL_DATA_TYPE, value_column]
    rows = df[df[COL_DATA_TYPE].isin([REPORT, TARGET])]
    if rows.empty:
        return pd.DataFrame(columns=columns)

    wide = (
        rows.groupby(keys + [COL_DATA_TYPE], sort=False, dropna=False)[value_column]
        .last()
        .unstack(COL_DATA_TYPE)
        .reindex(columns=[REPORT, TARGET])
    )
    wide.columns.name = None

    has_report = wide[REPORT].notna()
    synthesized = int((has_report & wide[TARGET].isna()).sum())
    raised = int((has_report & (wide[REPORT] > wide[TARGET])).sum())
    wide.loc[has_report, TARGET] = wide.loc[has_report, [REPORT, TARGET]].max(axis=1)

    if synthesized or raised:
        logger.debug(f"Reconciled targets: {synthesized} synthesized, {raised} raised to reported value")

    long = (
        wide.reset_index()
        .melt(id_vars=keys, value_vars=[REPORT, TARGET],
              var_name=COL_DATA_TYPE, value_name=value_column)
        .dropna(subset=[value_column])
    )
    return long.sort_values(keys + [COL_DATA_TYPE], kind="mergesort").reset_index(drop=True)[columns]
