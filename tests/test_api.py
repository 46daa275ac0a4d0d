"""End-to-end tests for the public counting entry points."""

import pandas as pd
import pytest

from ventas_core import (
    AdvisorAggregateResult,
    CountValue,
    DataQualityError,
    EngineConfig,
    RawLineRecord,
    group_and_count_sales,
    group_and_count_sales_by_advisor,
)
from ventas_core.frames import EXPORT_COLUMN_MAP


@pytest.fixture
def month_lines() -> list[RawLineRecord]:
    """A month of export lines covering the common transaction shapes."""
    return [
        # Credit sale: invoice plus financing document two days later
        RawLineRecord(100000, "A", "2024-03-01", "CREDITO", "FINANSUENOS", "FV00", "00123"),
        RawLineRecord(-30000, "A", "2024-03-03", None, None, "DV00", "00123"),
        # Cash sale fully returned within the week
        RawLineRecord(45000, "B", "05/03/2024", "CONTADO", "EFECTIVO", "FV00", "456"),
        RawLineRecord(-45000, "B", "07/03/2024", "CONTADO", "EFECTIVO", "DV00", "456"),
        # Same customer, two separate purchases two weeks apart
        RawLineRecord(20000, "C", "2024-03-02", "CONTADO", "TARJETA", "FV00", "01"),
        RawLineRecord(35000, "C", "2024-03-16", "CONVENIO", "NOMINA", "FV00", "789"),
        # Return with no sale in the period
        RawLineRecord(-12000, "D", "2024-03-10", None, None, "DV00", "456"),
        # Unparseable date
        RawLineRecord(99999, "E", "sin fecha", "CONTADO", "EFECTIVO", "FV00", "456"),
    ]


def test_spec_example() -> None:
    """Invoice of 100000 and credit of -30000 two days later: one sale of 70000."""
    lines = [
        RawLineRecord(100000, "A", "2024-03-01", "CREDIT", document_class="FV00"),
        RawLineRecord(-30000, "A", "2024-03-03", document_class="DV00"),
    ]
    result = group_and_count_sales(lines)
    assert result.total_sales_count == 1
    assert result.total_sales_value == 70000
    assert result.by_type["CREDIT"] == CountValue(1, 70000)


def test_group_and_count_sales(month_lines: list[RawLineRecord]) -> None:
    result = group_and_count_sales(month_lines)
    assert result.total_sales_count == 3
    assert result.total_sales_value == 125000
    assert result.by_type == {
        "CREDITO": CountValue(1, 70000),
        "CONTADO": CountValue(1, 20000),
        "CONVENIO": CountValue(1, 35000),
    }
    assert result.by_payment_method["FINANSUENOS"] == CountValue(1, 70000)


def test_group_and_count_sales_is_idempotent(month_lines: list[RawLineRecord]) -> None:
    assert group_and_count_sales(month_lines) == group_and_count_sales(month_lines)


def test_empty_input() -> None:
    result = group_and_count_sales([])
    assert result.as_dict() == {
        "totalSalesCount": 0,
        "totalSalesValue": 0,
        "byType": {},
        "byPaymentMethod": {},
    }


def test_group_and_count_sales_by_advisor(month_lines: list[RawLineRecord]) -> None:
    advisor_types = {"00123": "EXTERNO", "00789": "CORRETAJE"}
    result = group_and_count_sales_by_advisor(month_lines, advisor_types)

    assert isinstance(result, AdvisorAggregateResult)
    assert result.total_sales_count == 3
    assert set(result.by_advisor) == {"00123", "01", "789"}
    assert result.by_advisor["00123"].total_value == 70000
    assert result.by_advisor_type == {
        "INTERNAL": CountValue(1, 20000),
        "EXTERNAL": CountValue(1, 70000),
        "BROKERED": CountValue(1, 35000),
    }
    assert sum(v.value for v in result.by_advisor_type.values()) == result.total_sales_value


def test_by_advisor_is_idempotent(month_lines: list[RawLineRecord]) -> None:
    advisor_types = {"00123": "INTERNO"}
    first = group_and_count_sales_by_advisor(month_lines, advisor_types)
    second = group_and_count_sales_by_advisor(month_lines, advisor_types)
    assert first == second


def test_accepts_dataframe() -> None:
    df = pd.DataFrame(
        {
            "identifica": ["A", "A", "B"],
            "fecha_fact": ["01/03/2024", "03/03/2024", "04/03/2024"],
            "tipo_venta": ["CREDITO", None, "CONTADO"],
            "forma1pago": ["FINANSUENOS", None, "EFECTIVO"],
            "mcnclase": ["FV00", "DV00", "FV00"],
            "vtas_ant_i": ["100.000", "-30.000", "15.000"],
            "codigo_ase": ["123", "123", "01"],
        }
    )
    result = group_and_count_sales_by_advisor(df, {"00123": "INTERNO"}, column_map=EXPORT_COLUMN_MAP)
    assert result.total_sales_count == 2
    assert result.total_sales_value == 85000.0
    assert result.by_advisor_type["INTERNAL"] == CountValue(2, 85000.0)


def test_accepts_stored_text_dataframe() -> None:
    """Stored rows loaded as text keep "." as the decimal separator."""
    df = pd.DataFrame(
        {
            "cliente_identificacion": ["A", "A"],
            "fecha": ["2024-03-01", "2024-03-02"],
            "tipo_venta": ["CREDITO", "CREDITO"],
            "forma1_pago": ["FINANSUENOS", "FINANSUENOS"],
            "mcn_clase": ["FV00", "DV00"],
            "vtas_ant_i": ["150000.50", "-50000.25"],
        },
        dtype=str,
    )
    result = group_and_count_sales(df)
    assert result.total_sales_count == 1
    assert result.total_sales_value == pytest.approx(100000.25)


def test_dataframe_without_value_column() -> None:
    with pytest.raises(DataQualityError):
        group_and_count_sales(pd.DataFrame({"fecha": ["2024-03-01"]}))


def test_config_is_passed_through(month_lines: list[RawLineRecord]) -> None:
    """Widening the window merges customer C's two purchases."""
    result = group_and_count_sales(month_lines, config=EngineConfig(max_days_difference=14))
    assert result.total_sales_count == 2
    assert result.total_sales_value == 125000
