"""Record types for the sales grouping engine.

Three grains are involved:

- **RawLineRecord**: one accounting document line, as exported.
- **SaleGroup**: the lines believed to form one commercial transaction.
- **UniqueSale**: a SaleGroup with positive net value, classified.

All types are frozen dataclasses; the engine never mutates its input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ventas_core.utils import line_value


@dataclass(frozen=True)
class RawLineRecord:
    """One exported accounting document line.

    Attributes:
        value: Monetary amount of the line. Negative for returns/adjustments.
        customer_id: Customer identifier (cédula/NIT). None when unknown.
        date: Textual date (DD/MM/YYYY, DD-MM-YYYY, YYYY-MM-DD, YYYY/MM/DD).
        sale_type: Raw sale classification (e.g. CONTADO, CREDITO).
        payment_method: Raw payment-method label.
        document_class: Accounting document class (e.g. FV00, DV00).
        advisor_code: Code of the advisor the line is attributed to.
        advisor_name: Display name of the advisor, when exported.
    """

    value: float
    customer_id: Optional[str] = None
    date: Optional[str] = None
    sale_type: Optional[str] = None
    payment_method: Optional[str] = None
    document_class: Optional[str] = None
    advisor_code: Optional[str] = None
    advisor_name: Optional[str] = None


@dataclass(frozen=True)
class SaleGroup:
    """Lines of one customer believed to represent one transaction.

    Attributes:
        customer_id: Normalized customer id of every member.
        document_class: Normalized document class of the anchor line.
        records: Member lines, anchor first, in date order.
        min_date: Anchor date (the earliest member date).
        max_date: Latest member date.
    """

    customer_id: str
    document_class: str
    records: tuple[RawLineRecord, ...]
    min_date: date
    max_date: date

    @property
    def anchor(self) -> RawLineRecord:
        return self.records[0]

    @property
    def total_value(self) -> float:
        """Net value of the group (sum of member values)."""
        return sum(line_value(r.value) for r in self.records)


@dataclass(frozen=True)
class UniqueSale:
    """A promoted, net-positive SaleGroup.

    Classification labels are upper-cased and never None; missing values fall
    back to the configured unknown label.

    Attributes:
        customer_id: Normalized customer id.
        document_class: Anchor document class.
        sale_type: Sale-type label.
        payment_method: Payment-method label.
        total_value: Net value, always > 0.
        advisor_code: Trimmed advisor code.
        advisor_name: Advisor display name, if any member carried one.
        min_date: Earliest member date.
        max_date: Latest member date.
        records: Member lines of the originating group.
    """

    customer_id: str
    document_class: str
    sale_type: str
    payment_method: str
    total_value: float
    advisor_code: str
    advisor_name: Optional[str] = None
    min_date: Optional[date] = None
    max_date: Optional[date] = None
    records: tuple[RawLineRecord, ...] = field(default=(), repr=False, compare=False)
