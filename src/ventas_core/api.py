"""Public entry points for counting unique sales.

Example:
    >>> import pandas as pd
    >>> from ventas_core.api import group_and_count_sales
    >>>
    >>> ventas = pd.DataFrame(
    ...     {
    ...         "cliente_identificacion": ["A", "A"],
    ...         "fecha": ["2024-03-01", "2024-03-03"],
    ...         "tipo_venta": ["CREDITO", None],
    ...         "forma1_pago": ["FINANSUENOS", None],
    ...         "mcn_clase": ["FV00", "DV00"],
    ...         "vtas_ant_i": [100000, -30000],
    ...     }
    ... )
    >>> result = group_and_count_sales(ventas)
    >>> result.total_sales_count, result.total_sales_value
    (1, 70000.0)

Both functions are pure: the caller owns any caching of results.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Optional, Union

import pandas as pd

from ventas_core.aggregate import (
    AdvisorAggregateResult,
    AggregateResult,
    aggregate_sales,
    aggregate_sales_by_advisor,
)
from ventas_core.config import EngineConfig
from ventas_core.frames import records_from_frame
from ventas_core.grouping import group_sales
from ventas_core.records import RawLineRecord

logger = logging.getLogger(__name__)

SalesInput = Union[pd.DataFrame, Iterable[RawLineRecord]]


def _as_records(
    records: SalesInput,
    column_map: Optional[Mapping[str, str]],
    decimal: Optional[str] = None,
) -> list[RawLineRecord]:
    if isinstance(records, pd.DataFrame):
        return records_from_frame(records, column_map, decimal)
    return list(records)


def group_and_count_sales(
    records: SalesInput,
    *,
    config: Optional[EngineConfig] = None,
    column_map: Optional[Mapping[str, str]] = None,
    decimal: Optional[str] = None,
) -> AggregateResult:
    """Count unique sales by sale type and payment method.

    Args:
        records: RawLineRecords, or a DataFrame of sales rows.
        config: Engine configuration. Defaults to EngineConfig().
        column_map: Column → field map, used only for DataFrame input.
        decimal: Decimal separator of text amounts in DataFrame input.
            Defaults to "," for EXPORT_COLUMN_MAP and "." otherwise.

    Returns:
        AggregateResult for the given rows.

    Raises:
        DataQualityError: If a DataFrame lacks the value or date column.
    """
    lines = _as_records(records, column_map, decimal)
    logger.info("Counting unique sales over %d line(s)", len(lines))
    return aggregate_sales(group_sales(lines, config))


def group_and_count_sales_by_advisor(
    records: SalesInput,
    advisor_type_map: Mapping[str, str],
    *,
    config: Optional[EngineConfig] = None,
    column_map: Optional[Mapping[str, str]] = None,
    decimal: Optional[str] = None,
) -> AdvisorAggregateResult:
    """Count unique sales per advisor and advisor type.

    Args:
        records: RawLineRecords, or a DataFrame of sales rows.
        advisor_type_map: Normalized advisor code → advisor-type label.
        config: Engine configuration. Defaults to EngineConfig().
        column_map: Column → field map, used only for DataFrame input.
        decimal: Decimal separator of text amounts in DataFrame input.
            Defaults to "," for EXPORT_COLUMN_MAP and "." otherwise.

    Returns:
        AdvisorAggregateResult for the given rows.

    Raises:
        DataQualityError: If a DataFrame lacks the value or date column.
    """
    lines = _as_records(records, column_map, decimal)
    logger.info(
        "Counting unique sales by advisor over %d line(s), %d mapped advisor(s)",
        len(lines),
        len(advisor_type_map),
    )
    return aggregate_sales_by_advisor(group_sales(lines, config), advisor_type_map, config)
