"""Tests for DataFrame and row adapters."""

from datetime import date

import numpy as np
import pandas as pd
import pytest

from ventas_core.exceptions import ConfigError, DataQualityError
from ventas_core.frames import (
    EXPORT_COLUMN_MAP,
    parse_amount,
    records_from_frame,
    records_from_rows,
    unique_sales_to_frame,
)
from ventas_core.grouping import group_sales
from ventas_core.records import RawLineRecord


@pytest.fixture
def ventas_df() -> pd.DataFrame:
    """Stored ventas rows, as returned by the data layer."""
    return pd.DataFrame(
        {
            "cliente_identificacion": [1020304.0, 1020304.0, np.nan],
            "fecha": ["2024-03-01", "2024-03-03", "05/03/2024"],
            "tipo_venta": ["CREDITO", None, "contado"],
            "forma1_pago": ["FINANSUENOS", None, "EFECTIVO"],
            "mcn_clase": ["FV00", "DV00", "FV00"],
            "vtas_ant_i": [100000, -30000, np.nan],
            "codigo_asesor": ["00123", "00123", "456"],
            "asesor_nombre": ["Ana", "Ana", None],
            "cod_region": [1, 1, 2],
        }
    )


@pytest.mark.parametrize(
    "value, expected",
    [
        (100, 100.0),
        (-30000.5, -30000.5),
        (np.int64(7), 7.0),
        ("150000.50", 150000.5),
        ("-30000", -30000.0),
        ("  ", 0.0),
        ("n/a", 0.0),
        (None, 0.0),
        (float("nan"), 0.0),
    ],
)
def test_parse_amount(value, expected: float) -> None:
    assert parse_amount(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("1.234.567,50", 1234567.5),
        ("100.000", 100000.0),
        ("-30.000", -30000.0),
        ("10,5", 10.5),
        ("n/a", 0.0),
    ],
)
def test_parse_amount_export_format(value: str, expected: float) -> None:
    """The accounting export uses "." for thousands and "," for decimals."""
    assert parse_amount(value, decimal=",") == expected


def test_parse_amount_rejects_unknown_separator() -> None:
    with pytest.raises(ConfigError, match="decimal"):
        parse_amount("1", decimal=";")


class TestRecordsFromRows:
    def test_maps_stored_columns(self) -> None:
        rows = [
            {
                "cliente_identificacion": " 99 ",
                "fecha": "2024-03-01",
                "tipo_venta": "CREDITO",
                "forma1_pago": "FNZ",
                "mcn_clase": "FV00",
                "vtas_ant_i": 5000,
                "codigo_asesor": "01",
            }
        ]
        assert records_from_rows(rows) == [
            RawLineRecord(
                value=5000.0,
                customer_id="99",
                date="2024-03-01",
                sale_type="CREDITO",
                payment_method="FNZ",
                document_class="FV00",
                advisor_code="01",
            )
        ]

    def test_missing_columns_become_none(self) -> None:
        records = records_from_rows([{"fecha": "2024-03-01"}])
        assert records == [RawLineRecord(value=0.0, date="2024-03-01")]

    def test_custom_column_map(self) -> None:
        rows = [{"identifica": "7", "fecha_fact": "01/03/2024", "mcnclase": "DV00", "vtas_ant_i": "-1.000"}]
        record = records_from_rows(rows, EXPORT_COLUMN_MAP)[0]
        assert record.customer_id == "7"
        assert record.document_class == "DV00"
        assert record.value == -1000.0

    def test_stored_amount_strings_use_decimal_point(self) -> None:
        rows = [
            {"fecha": "2024-03-01", "vtas_ant_i": "150000.50"},
            {"fecha": "2024-03-02", "vtas_ant_i": "-1000"},
        ]
        assert [r.value for r in records_from_rows(rows)] == [150000.5, -1000.0]

    def test_explicit_decimal_overrides_column_map(self) -> None:
        rows = [{"fecha": "2024-03-01", "vtas_ant_i": "1.500,25"}]
        assert records_from_rows(rows, decimal=",")[0].value == 1500.25

    def test_unknown_decimal_raises(self) -> None:
        with pytest.raises(ConfigError):
            records_from_rows([], decimal=";")


class TestRecordsFromFrame:
    def test_converts_rows_in_order(self, ventas_df: pd.DataFrame) -> None:
        records = records_from_frame(ventas_df)
        assert len(records) == 3
        assert records[0].customer_id == "1020304"
        assert records[1].sale_type is None
        assert records[2].customer_id is None
        assert records[2].value == 0.0
        assert records[2].sale_type == "contado"

    def test_does_not_mutate_input(self, ventas_df: pd.DataFrame) -> None:
        before = ventas_df.copy()
        records_from_frame(ventas_df)
        pd.testing.assert_frame_equal(ventas_df, before)

    def test_column_names_case_insensitive(self) -> None:
        df = pd.DataFrame({"IDENTIFICA": ["A"], "Fecha_Fact": ["2024-03-01"], "VTAS_ANT_I": ["10,5"]})
        records = records_from_frame(df, EXPORT_COLUMN_MAP)
        assert records == [RawLineRecord(value=10.5, customer_id="A", date="2024-03-01")]

    def test_text_frame_keeps_decimal_point(self) -> None:
        """Stored rows read with dtype=str keep their decimal point."""
        df = pd.DataFrame(
            {
                "cliente_identificacion": ["9"],
                "fecha": ["2024-03-01"],
                "mcn_clase": ["FV00"],
                "vtas_ant_i": ["150000.50"],
            },
            dtype=str,
        )
        records = records_from_frame(df)
        assert records[0].value == 150000.5
        assert [s.total_value for s in group_sales(records)] == [150000.5]

    def test_missing_value_column_raises(self) -> None:
        df = pd.DataFrame({"fecha": ["2024-03-01"]})
        with pytest.raises(DataQualityError, match="value"):
            records_from_frame(df)

    def test_missing_date_column_raises(self) -> None:
        df = pd.DataFrame({"vtas_ant_i": [1]})
        with pytest.raises(DataQualityError, match="date"):
            records_from_frame(df)

    def test_empty_frame(self) -> None:
        df = pd.DataFrame(columns=["fecha", "vtas_ant_i"])
        assert records_from_frame(df) == []


def test_unique_sales_to_frame(ventas_df: pd.DataFrame) -> None:
    """Engine output renders as one row per unique sale."""
    df = unique_sales_to_frame(group_sales(records_from_frame(ventas_df)))
    assert len(df) == 1
    row = df.iloc[0]
    assert row["customer_id"] == "1020304"
    assert row["total_value"] == 70000.0
    assert row["sale_type"] == "CREDITO"
    assert row["advisor_code"] == "00123"
    assert row["min_date"] == date(2024, 3, 1)
    assert row["max_date"] == date(2024, 3, 3)
    assert row["line_count"] == 2


def test_unique_sales_to_frame_empty() -> None:
    df = unique_sales_to_frame([])
    assert df.empty
    assert "total_value" in df.columns
