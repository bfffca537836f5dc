"""Shared fixtures for GFCR pipeline tests.

Indicator tables are built in memory with the same column names the
platform export uses.
"""

import pandas as pd
import pytest

from gfcr_pipeline.config import (
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
)


def indicator_rows(rows, value_column=COL_VALUE):
    """rows: (project, title, date, data_type, indicator, value)."""
    return pd.DataFrame(
        rows,
        columns=[COL_PROJECT, COL_TITLE, COL_REPORTING_DATE, COL_DATA_TYPE, COL_INDICATOR, value_column],
    )


def business_rows(rows):
    """rows: (project, title, date, data_type, business)."""
    return pd.DataFrame(
        rows,
        columns=[COL_PROJECT, COL_TITLE, COL_REPORTING_DATE, COL_DATA_TYPE, COL_BUSINESS],
    )


def investment_rows(rows):
    """rows: (project, title, date, data_type, business, mechanism, sector, source, type, amount)."""
    return pd.DataFrame(
        rows,
        columns=[
            COL_PROJECT, COL_TITLE, COL_REPORTING_DATE, COL_DATA_TYPE,
            COL_BUSINESS, COL_FINANCE_MECHANISM, COL_SECTOR,
            COL_INVESTMENT_SOURCE, COL_INVESTMENT_TYPE, COL_INVESTMENT_AMOUNT,
        ],
    )


@pytest.fixture
def jobs_table():
    """Program A: Report 50 vs Target 40 (raised to 50). Program B: Report 30,
    no target (synthesized as 30). Reported 80, Target 80."""
    return indicator_rows([
        ("Program A", "2022 Annual", "2022-12-31", "Report", "F6.1a Local jobs (men)", 5),
        ("Program A", "2023 Annual", "2023-12-31", "Report", "F6.1a Local jobs (men)", 30),
        ("Program A", "2023 Annual", "2023-12-31", "Report", "F6.1b Local jobs (women)", 20),
        ("Program A", "2023 Annual", "2023-12-31", "Report", "F6.2 Indirect jobs", 500),
        ("Program A", "Targets", "2022-01-15", "Target", "F6.1a Local jobs (men)", 40),
        ("Program A", "Test", "2024-01-01", "Report", "F6.1a Local jobs (men)", 9999),
        ("Program B", "2023 Annual", "2023-11-30", "Report", "F6.1b Local jobs (women)", 30),
    ])


@pytest.fixture
def gfcr_tables(jobs_table):
    """A full set of indicator sheets for Programs A and B, plus Program C
    which only ever entered targets."""
    f6 = pd.concat([
        jobs_table,
        indicator_rows([
            ("Program C", "Targets", "2022-03-01", "Target", "F6.1a Local jobs (men)", 1000),
        ]),
    ], ignore_index=True)

    f7 = indicator_rows([
        ("Program A", "2023 Annual", "2023-12-31", "Report", "F7.2a Beneficiaries (men)", 100),
        ("Program A", "2023 Annual", "2023-12-31", "Report", "F7.2b Beneficiaries (women)", 150),
        ("Program A", "Targets", "2022-01-15", "Target", "F7.2a Beneficiaries (men)", 200),
        ("Program A", "Targets", "2022-01-15", "Target", "F7.2b Beneficiaries (women)", 300),
        ("Program A", "2023 Annual", "2023-12-31", "Report", "F7.1 Other", 7),
    ])

    f1 = indicator_rows([
        ("Program A", "2023 Annual", "2023-12-31", "Report", "F1 Area of coral reef", 2.5),
        ("Program A", "Targets", "2022-01-15", "Target", "F1 Area of coral reef", 4.0),
        ("Program B", "2023 Annual", "2023-11-30", "Report", "F1 Area of coral reef", 1.0),
        ("Program C", "Targets", "2022-03-01", "Target", "F1 Area of coral reef", 50.0),
    ], value_column=COL_AREA)

    f2 = indicator_rows([
        ("Program A", "2023 Annual", "2023-12-31", "Report", "F2.1b Locally managed area", 0.5),
        ("Program A", "2023 Annual", "2023-12-31", "Report", "F2.2b Protected area", 0.25),
        ("Program A", "2023 Annual", "2023-12-31", "Report", "F2.1a Existing managed area", 9.0),
        ("Program A", "Targets", "2022-01-15", "Target", "F2.1b Locally managed area", 1.0),
    ], value_column=COL_AREA)

    businesses = business_rows([
        ("Program A", "2023 Annual", "2023-12-31", "Report", "Reef Tours"),
        ("Program A", "2022 Annual", "2022-12-31", "Report", "Reef Tours"),
        ("Program A", "Targets", "2022-01-15", "Target", "Reef Tours"),
        ("Program A", "Targets", "2022-01-15", "Target", "Seaweed Farm"),
        ("Program B", "2023 Annual", "2023-11-30", "Report", "Blue Bond"),
    ])

    investments = investment_rows([
        ("Program A", "2023 Annual", "2023-12-31", "Report", "Reef Tours", "Blended", "Tourism", "Public", "Grant", 100.0),
        ("Program A", "Targets", "2022-01-15", "Target", "Reef Tours", "Blended", "Tourism", "Public", "Grant", 120.0),
        ("Program A", "2023 Annual", "2023-12-31", "Report", "Reef Tours", "Blended", "Tourism", "Private", "Equity", 50.0),
        ("Program A", "2023 Annual", "2023-12-31", "Report", "Reef Tours", "Blended", "Tourism", "GFCR", "Grant", 1000.0),
        ("Program B", "2023 Annual", "2023-11-30", "Report", "Blue Bond", None, None, "Private", "Debt", 25.0),
    ])

    return {
        "F1": f1,
        "F2": f2,
        "F6": f6,
        "F7": f7,
        "BusinessesFinanceSolutions": businesses,
        "Investments": investments,
    }
