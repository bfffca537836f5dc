"""
GFCR Progress Pipeline
======================

Aggregates Global Fund for Coral Reefs program reporting from MERMAID
into a single progress table: reported vs target for six headline
impact metrics.

Usage:
    python -m gfcr_pipeline.orchestrator
"""

__version__ = "0.1.0"
