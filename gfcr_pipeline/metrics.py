"""
GFCR impact metric aggregation.

Five of the six headline metrics share one routine, aggregate_metric(),
configured by a MetricSpec:

    normalize -> indicator filter -> per-round sum -> latest per key
              -> target reconciliation -> totals -> unit conversion

Reef-positive businesses are a plain distinct count of
(program, business) pairs and skip the reduction/reconciliation steps.
"""

import logging
from typing import Dict, List

import pandas as pd

from .config import (
    COL_AREA,
    COL_BUSINESS,
    COL_DATA_TYPE,
    COL_FINANCE_MECHANISM,
    COL_INDICATOR,
    COL_INVESTMENT_AMOUNT,
    COL_INVESTMENT_SOURCE,
    COL_INVESTMENT_TYPE,
    COL_PROJECT,
    COL_REPORTING_DATE,
    COL_SECTOR,
    COL_TITLE,
    COL_VALUE,
    KM2_TO_HA,
    LEVERAGED_SOURCES,
    REPORT,
    SHEET_BUSINESSES,
    SHEET_F1,
    SHEET_F2,
    SHEET_F6,
    SHEET_F7,
    SHEET_INVESTMENTS,
    TARGET,
)
from .models import MetricSchemaError, MetricSpec, MetricSummary
from .normalize import normalize_records
from .reconcile import reconcile_targets, reduce_to_latest

logger = logging.getLogger(__name__)


# ============================================================================
# Metric definitions (output order)
# ============================================================================

BUSINESSES_RESPONSE = "Reef-positive businesses"

JOBS = MetricSpec(
    response="Directly supported jobs",
    sheet=SHEET_F6,
    indicator_pattern=r"F6\.1[ab]",
    value_column=COL_VALUE,
    group_key=(COL_PROJECT,),
)

BENEFICIARIES = MetricSpec(
    response="Community resilience beneficiaries",
    sheet=SHEET_F7,
    indicator_pattern=r"F7\.2[ab]",
    value_column=COL_VALUE,
    group_key=(COL_PROJECT,),
)

REEF_AREA = MetricSpec(
    response="Coral reef area managed (ha)",
    sheet=SHEET_F1,
    indicator_pattern=r"F1\b",
    value_column=COL_AREA,
    group_key=(COL_PROJECT,),
    scale=KM2_TO_HA,
)

PROTECTED_AREA = MetricSpec(
    response="Protected or locally managed area (ha)",
    sheet=SHEET_F2,
    indicator_pattern=r"F2\.[12]b",
    value_column=COL_AREA,
    group_key=(COL_PROJECT,),
    scale=KM2_TO_HA,
)

LEVERAGED_FINANCE = MetricSpec(
    response="Leveraged finance (USD)",
    sheet=SHEET_INVESTMENTS,
    value_column=COL_INVESTMENT_AMOUNT,
    group_key=(
        COL_PROJECT,
        COL_BUSINESS,
        COL_FINANCE_MECHANISM,
        COL_SECTOR,
        COL_INVESTMENT_SOURCE,
        COL_INVESTMENT_TYPE,
    ),
    row_filter={COL_INVESTMENT_SOURCE: LEVERAGED_SOURCES},
)

RECONCILED_METRICS = [JOBS, BENEFICIARIES, REEF_AREA, PROTECTED_AREA, LEVERAGED_FINANCE]


# ============================================================================
# Aggregation
# ============================================================================

def _require_columns(tables: Dict[str, pd.DataFrame], sheet: str,
                     columns: List[str], metric: str) -> pd.DataFrame:
    """Return the sheet, raising MetricSchemaError if it or any column is missing."""
    if sheet not in tables:
        raise MetricSchemaError(metric, [f"sheet '{sheet}'"])
    df = tables[sheet]
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise MetricSchemaError(metric, missing)
    return df


def aggregate_metric(tables: Dict[str, pd.DataFrame], spec: MetricSpec) -> MetricSummary:
    """Reduce, reconcile and total one metric across all programs."""
    df = _require_columns(tables, spec.sheet, spec.required_columns, spec.response)
    keys = list(spec.group_key)
    value = spec.value_column

    records = normalize_records(df)
    if spec.indicator_pattern is not None:
        match = records[COL_INDICATOR].astype(str).str.match(spec.indicator_pattern)
        records = records[match]
    for column, allowed in spec.row_filter.items():
        records = records[records[column].isin(allowed)]

    if records.empty:
        logger.warning(f"{spec.response}: no matching records")
        return MetricSummary(response=spec.response, reported=0.0, target=0.0)

    records = records.copy()
    records[keys] = records[keys].fillna("")
    records[value] = pd.to_numeric(records[value], errors="coerce").fillna(0.0)

    # Sub-indicators of the same report round add up
    per_round = (
        records.groupby(keys + [COL_TITLE, COL_REPORTING_DATE, COL_DATA_TYPE],
                        sort=False, dropna=False)[value]
        .sum()
        .reset_index()
    )
    latest = reduce_to_latest(per_round, keys)
    reconciled = reconcile_targets(latest, keys, value)

    is_report = reconciled[COL_DATA_TYPE] == REPORT
    is_target = reconciled[COL_DATA_TYPE] == TARGET
    reported = float(reconciled.loc[is_report, value].sum()) * spec.scale
    target = float(reconciled.loc[is_target, value].sum()) * spec.scale

    logger.info(
        f"{spec.response}: reported={reported:,.2f}, target={target:,.2f} "
        f"({reconciled[COL_PROJECT].nunique()} programs, {len(reconciled)} reconciled rows)"
    )
    return MetricSummary(response=spec.response, reported=reported, target=target)


def count_businesses(tables: Dict[str, pd.DataFrame]) -> MetricSummary:
    """Distinct (program, business) pairs: reported ones vs all planned ones."""
    columns = [COL_PROJECT, COL_BUSINESS, COL_DATA_TYPE]
    df = _require_columns(tables, SHEET_BUSINESSES, columns, BUSINESSES_RESPONSE)

    records = normalize_records(df).dropna(subset=[COL_PROJECT, COL_BUSINESS])
    records = records.assign(**{COL_BUSINESS: records[COL_BUSINESS].astype(str).str.strip()})
    pairs = [COL_PROJECT, COL_BUSINESS]

    reported = records.loc[records[COL_DATA_TYPE] == REPORT, pairs].drop_duplicates()
    planned = records.loc[records[COL_DATA_TYPE].isin([REPORT, TARGET]), pairs].drop_duplicates()

    logger.info(f"{BUSINESSES_RESPONSE}: reported={len(reported)}, target={len(planned)}")
    return MetricSummary(
        response=BUSINESSES_RESPONSE,
        reported=len(reported),
        target=len(planned),
    )


def aggregate_all(tables: Dict[str, pd.DataFrame]) -> List[MetricSummary]:
    """All six metrics in output order."""
    summaries = [count_businesses(tables)]
    for spec in RECONCILED_METRICS:
        summaries.append(aggregate_metric(tables, spec))
    return summaries
