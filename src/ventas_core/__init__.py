"""Ventas Core - unique-sale counting for sales-force dashboards.

Accounting exports carry one row per document line, and one commercial sale
may span several lines (an invoice plus its credit document, or an invoice
and a later return). This package collapses those lines into unique sales and
summarizes them:

- **Grouping**: per customer, lines within a 7-day window that pair up
  (FV00 with DV00) or share a document class form one group.
- **Promotion**: groups with positive net value become unique sales.
- **Aggregation**: counts and values by sale type, payment method, advisor
  and advisor type.

Module Structure:
    ventas_core.api: group_and_count_sales, group_and_count_sales_by_advisor
    ventas_core.grouping: build_groups, group_sales
    ventas_core.aggregate: aggregate_sales, aggregate_sales_by_advisor
    ventas_core.advisors: advisor-type resolution
    ventas_core.frames: DataFrame/row adapters
    ventas_core.config: EngineConfig

Quick Start:
    >>> from ventas_core import RawLineRecord, group_and_count_sales
    >>>
    >>> lines = [
    ...     RawLineRecord(100000, "A", "2024-03-01", "CREDITO", document_class="FV00"),
    ...     RawLineRecord(-30000, "A", "2024-03-03", document_class="DV00"),
    ... ]
    >>> result = group_and_count_sales(lines)
    >>> result.by_type["CREDITO"]
    CountValue(count=1, value=70000)
"""

__version__ = "0.1.0"

from ventas_core.aggregate import AdvisorAggregateResult, AggregateResult, CountValue
from ventas_core.api import group_and_count_sales, group_and_count_sales_by_advisor
from ventas_core.config import EngineConfig
from ventas_core.exceptions import ConfigError, DataQualityError, VentasCoreError
from ventas_core.records import RawLineRecord, UniqueSale

__all__ = [
    "AdvisorAggregateResult",
    "AggregateResult",
    "ConfigError",
    "CountValue",
    "DataQualityError",
    "EngineConfig",
    "RawLineRecord",
    "UniqueSale",
    "VentasCoreError",
    "__version__",
    "group_and_count_sales",
    "group_and_count_sales_by_advisor",
]
