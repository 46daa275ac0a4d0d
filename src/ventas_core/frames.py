"""Adapters between tabular data and engine records.

Sales rows reach the engine either as stored ``ventas`` rows (one mapping per
row) or as a pandas DataFrame. This module maps column names onto
RawLineRecord fields and turns engine output back into DataFrames.
"""

from __future__ import annotations

import logging
import math
import numbers
from collections.abc import Iterable, Mapping
from typing import Any, Optional

import pandas as pd

from ventas_core.exceptions import ConfigError, DataQualityError
from ventas_core.records import RawLineRecord, UniqueSale
from ventas_core.utils import clean_text

logger = logging.getLogger(__name__)

# Stored ventas table columns -> record fields
DEFAULT_COLUMN_MAP = {
    "cliente_identificacion": "customer_id",
    "fecha": "date",
    "tipo_venta": "sale_type",
    "forma1_pago": "payment_method",
    "mcn_clase": "document_class",
    "vtas_ant_i": "value",
    "codigo_asesor": "advisor_code",
    "asesor_nombre": "advisor_name",
}

# Raw accounting export headers -> record fields
EXPORT_COLUMN_MAP = {
    "identifica": "customer_id",
    "fecha_fact": "date",
    "tipo_venta": "sale_type",
    "forma1pago": "payment_method",
    "mcnclase": "document_class",
    "vtas_ant_i": "value",
    "codigo_ase": "advisor_code",
    "asesor": "advisor_name",
}

REQUIRED_FIELDS = ("value", "date")

DECIMAL_SEPARATORS = (".", ",")

SALE_COLUMNS = [
    "customer_id",
    "document_class",
    "sale_type",
    "payment_method",
    "advisor_code",
    "advisor_name",
    "total_value",
    "min_date",
    "max_date",
    "line_count",
]


def parse_amount(value: Any, decimal: str = ".") -> float:
    """Parse a monetary amount; unparseable or missing values become 0.

    Numbers pass through. Strings are read with ``decimal`` as the decimal
    separator: ``"."`` for the stored ventas table, ``","`` for the raw
    accounting export, where ``.`` separates thousands.

    Examples:
        >>> parse_amount("150000.50")
        150000.5
        >>> parse_amount("1.234.567,50", decimal=",")
        1234567.5
        >>> parse_amount("n/a")
        0.0
    """
    if decimal not in DECIMAL_SEPARATORS:
        raise ConfigError(f"Invalid decimal '{decimal}'. Must be '.' or ','.")
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, numbers.Real):
        return 0.0 if math.isnan(float(value)) else float(value)
    text = clean_text(value)
    if not text:
        return 0.0
    if decimal == ",":
        text = text.replace(".", "").replace(",", ".", 1)
    parsed = pd.to_numeric(text, errors="coerce")
    return 0.0 if pd.isna(parsed) else float(parsed)


def _resolve_decimal(column_map: Mapping[str, str], decimal: Optional[str]) -> str:
    """Export headers carry the export's number format unless told otherwise."""
    if decimal is not None:
        if decimal not in DECIMAL_SEPARATORS:
            raise ConfigError(f"Invalid decimal '{decimal}'. Must be '.' or ','.")
        return decimal
    return "," if dict(column_map) == EXPORT_COLUMN_MAP else "."


def _record_from_row(
    row: Mapping[str, Any],
    column_map: Mapping[str, str],
    decimal: str,
) -> RawLineRecord:
    values: dict[str, Any] = {}
    for column, field_name in column_map.items():
        if column in row:
            values[field_name] = row[column]

    kwargs = {name: clean_text(v) for name, v in values.items() if name != "value"}
    return RawLineRecord(value=parse_amount(values.get("value"), decimal), **kwargs)


def records_from_rows(
    rows: Iterable[Mapping[str, Any]],
    column_map: Optional[Mapping[str, str]] = None,
    decimal: Optional[str] = None,
) -> list[RawLineRecord]:
    """Convert row mappings into RawLineRecords.

    Args:
        rows: One mapping per stored sales row.
        column_map: Source column → record field. Defaults to
            DEFAULT_COLUMN_MAP.
        decimal: Decimal separator of text amounts. Defaults to ``","`` for
            EXPORT_COLUMN_MAP and ``"."`` otherwise.

    Returns:
        List of RawLineRecord, in input order. Missing columns become None,
        a missing or malformed value becomes 0.
    """
    column_map = column_map or DEFAULT_COLUMN_MAP
    decimal = _resolve_decimal(column_map, decimal)
    return [_record_from_row(row, column_map, decimal) for row in rows]


def records_from_frame(
    df: pd.DataFrame,
    column_map: Optional[Mapping[str, str]] = None,
    decimal: Optional[str] = None,
) -> list[RawLineRecord]:
    """Convert a sales DataFrame into RawLineRecords.

    Column names are matched case-insensitively after trimming. The input
    frame is not modified.

    Args:
        df: Sales rows, one row per document line.
        column_map: Source column → record field. Defaults to
            DEFAULT_COLUMN_MAP.
        decimal: Decimal separator of text amounts. Defaults to ``","`` for
            EXPORT_COLUMN_MAP and ``"."`` otherwise.

    Returns:
        List of RawLineRecord, in row order.

    Raises:
        DataQualityError: If the columns mapped to the value or date field
            are missing.
    """
    decimal = _resolve_decimal(column_map or DEFAULT_COLUMN_MAP, decimal)
    column_map = {k.strip().lower(): v for k, v in (column_map or DEFAULT_COLUMN_MAP).items()}
    frame = df.rename(columns=lambda c: str(c).strip().lower())

    present_fields = {field for column, field in column_map.items() if column in frame.columns}
    missing = [f for f in REQUIRED_FIELDS if f not in present_fields]
    if missing:
        raise DataQualityError(
            f"Missing required columns for fields {missing}. "
            f"Available columns: {list(frame.columns)}"
        )

    columns = [c for c in column_map if c in frame.columns]
    frame = frame[columns].astype(object).where(frame[columns].notna(), None)
    records = records_from_rows(frame.to_dict("records"), column_map, decimal)
    logger.debug("Converted %d row(s) from DataFrame", len(records))
    return records


def unique_sales_to_frame(sales: Iterable[UniqueSale]) -> pd.DataFrame:
    """One row per unique sale, for tables and exports."""
    rows = [
        {
            "customer_id": s.customer_id,
            "document_class": s.document_class,
            "sale_type": s.sale_type,
            "payment_method": s.payment_method,
            "advisor_code": s.advisor_code,
            "advisor_name": s.advisor_name,
            "total_value": s.total_value,
            "min_date": s.min_date,
            "max_date": s.max_date,
            "line_count": len(s.records),
        }
        for s in sales
    ]
    return pd.DataFrame(rows, columns=SALE_COLUMNS)
