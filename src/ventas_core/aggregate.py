"""Aggregator: fold unique sales into summary counts and values.

Two reductions over the same UniqueSale list:

- ``aggregate_sales``: totals by sale type and payment method.
- ``aggregate_sales_by_advisor``: the same, plus per-advisor totals and the
  three advisor-type buckets (INTERNAL, EXTERNAL, BROKERED).

Both return fresh result objects; nothing is cached between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

import pandas as pd

from ventas_core.advisors import classify_advisor
from ventas_core.config import ADVISOR_TYPES, DEFAULT_CONFIG, EngineConfig
from ventas_core.records import UniqueSale

logger = logging.getLogger(__name__)


@dataclass
class CountValue:
    """Number of unique sales and their summed net value."""

    count: int = 0
    value: float = 0

    def add(self, value: float) -> None:
        self.count += 1
        self.value += value

    def as_dict(self) -> dict[str, Any]:
        return {"count": self.count, "value": self.value}


@dataclass
class AggregateResult:
    """Summary of unique sales by sale type and payment method.

    Attributes:
        total_sales_count: Number of unique sales.
        total_sales_value: Summed net value of all unique sales.
        by_type: Sale-type label → CountValue.
        by_payment_method: Payment-method label → CountValue.
    """

    total_sales_count: int = 0
    total_sales_value: float = 0
    by_type: dict[str, CountValue] = field(default_factory=dict)
    by_payment_method: dict[str, CountValue] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Plain-dict view with camelCase keys, ready for JSON."""
        return {
            "totalSalesCount": self.total_sales_count,
            "totalSalesValue": self.total_sales_value,
            "byType": {k: v.as_dict() for k, v in self.by_type.items()},
            "byPaymentMethod": {k: v.as_dict() for k, v in self.by_payment_method.items()},
        }

    def to_frame(self, by: str = "type") -> pd.DataFrame:
        """Breakdown as a DataFrame, sorted by value descending.

        Args:
            by: "type" for the sale-type breakdown, "payment_method" for the
                payment-method breakdown.

        Returns:
            DataFrame with columns [label, count, value, share], where share
            is the fraction of total_sales_value.

        Raises:
            ValueError: If by is not "type" or "payment_method".
        """
        if by == "type":
            breakdown = self.by_type
        elif by == "payment_method":
            breakdown = self.by_payment_method
        else:
            raise ValueError(f"Invalid by '{by}'. Must be 'type' or 'payment_method'.")
        return _breakdown_frame(breakdown, self.total_sales_value)


@dataclass
class AdvisorTotals:
    """Unique sales attributed to one advisor."""

    advisor_type: str
    total_count: int = 0
    total_value: float = 0
    by_type: dict[str, CountValue] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "advisorType": self.advisor_type,
            "totalCount": self.total_count,
            "totalValue": self.total_value,
            "byType": {k: v.as_dict() for k, v in self.by_type.items()},
        }


@dataclass
class AdvisorAggregateResult(AggregateResult):
    """AggregateResult plus per-advisor and per-advisor-type breakdowns.

    Attributes:
        by_advisor: Advisor code → AdvisorTotals.
        by_advisor_type: INTERNAL/EXTERNAL/BROKERED → CountValue. Always has
            the three keys, even when empty.
    """

    by_advisor: dict[str, AdvisorTotals] = field(default_factory=dict)
    by_advisor_type: dict[str, CountValue] = field(
        default_factory=lambda: {label: CountValue() for label in ADVISOR_TYPES}
    )

    def as_dict(self) -> dict[str, Any]:
        result = super().as_dict()
        result["byAdvisor"] = {k: v.as_dict() for k, v in self.by_advisor.items()}
        result["byAdvisorType"] = {k: v.as_dict() for k, v in self.by_advisor_type.items()}
        return result

    def advisors_frame(self) -> pd.DataFrame:
        """One row per advisor, sorted by total value descending."""
        rows = [
            {
                "advisor_code": code,
                "advisor_type": totals.advisor_type,
                "total_count": totals.total_count,
                "total_value": totals.total_value,
            }
            for code, totals in self.by_advisor.items()
        ]
        df = pd.DataFrame(
            rows, columns=["advisor_code", "advisor_type", "total_count", "total_value"]
        )
        return df.sort_values("total_value", ascending=False, kind="stable").reset_index(
            drop=True
        )


def _breakdown_frame(breakdown: Mapping[str, CountValue], total_value: float) -> pd.DataFrame:
    df = pd.DataFrame(
        [{"label": k, "count": v.count, "value": v.value} for k, v in breakdown.items()],
        columns=["label", "count", "value"],
    )
    df["share"] = df["value"] / total_value if total_value else 0.0
    return df.sort_values("value", ascending=False, kind="stable").reset_index(drop=True)


def _fold_totals(sales: list[UniqueSale], result: AggregateResult) -> None:
    for sale in sales:
        result.total_sales_count += 1
        result.total_sales_value += sale.total_value
        result.by_type.setdefault(sale.sale_type, CountValue()).add(sale.total_value)
        result.by_payment_method.setdefault(sale.payment_method, CountValue()).add(
            sale.total_value
        )


def aggregate_sales(sales: Iterable[UniqueSale]) -> AggregateResult:
    """Fold unique sales into totals by sale type and payment method.

    Args:
        sales: Unique sales, as returned by group_sales.

    Returns:
        AggregateResult. An empty input gives zero totals and empty maps.
    """
    result = AggregateResult()
    _fold_totals(list(sales), result)
    return result


def aggregate_sales_by_advisor(
    sales: Iterable[UniqueSale],
    advisor_type_map: Mapping[str, str],
    config: Optional[EngineConfig] = None,
) -> AdvisorAggregateResult:
    """Fold unique sales into totals by advisor and advisor type.

    Args:
        sales: Unique sales, as returned by group_sales.
        advisor_type_map: Normalized advisor code → advisor-type label
            (see build_advisor_type_map).
        config: Engine configuration. Defaults to EngineConfig().

    Returns:
        AdvisorAggregateResult. Sales whose advisor resolves to a label other
        than the three buckets count in by_advisor but not in by_advisor_type.
    """
    config = config or DEFAULT_CONFIG
    sales = list(sales)
    result = AdvisorAggregateResult()
    _fold_totals(sales, result)

    for sale in sales:
        advisor_type = classify_advisor(
            sale.advisor_code, advisor_type_map, sale.advisor_name, config
        )
        totals = result.by_advisor.get(sale.advisor_code)
        if totals is None:
            totals = AdvisorTotals(advisor_type=advisor_type)
            result.by_advisor[sale.advisor_code] = totals
        totals.total_count += 1
        totals.total_value += sale.total_value
        totals.by_type.setdefault(sale.sale_type, CountValue()).add(sale.total_value)

        bucket = result.by_advisor_type.get(advisor_type)
        if bucket is None:
            logger.debug(
                "Advisor %s has type %s outside the known buckets; not bucketed",
                sale.advisor_code,
                advisor_type,
            )
            continue
        bucket.add(sale.total_value)

    return result
