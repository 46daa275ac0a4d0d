"""Sale grouping engine: collapse document lines into unique sales.

Accounting exports carry one row per document line, and a single commercial
sale can span several documents issued a few days apart (the credit document
``DV00`` posts after the point-of-sale invoice ``FV00``; a return nets against
the invoice it reverses). This module walks each customer's lines in date
order and builds groups of lines that belong together:

1. Lines are partitioned by customer id (blank ids share one bucket).
2. Lines with an unparseable date are dropped.
3. The earliest unconsumed line anchors a new group; every later unconsumed
   line within the grouping window joins it if it pairs with the anchor
   (Sale-document with Credit-document) or has the same document class.
4. Groups whose net value is positive are promoted to UniqueSale; the rest
   (full returns, unmatched credits) are discarded.

Example:
    >>> from ventas_core.records import RawLineRecord
    >>> from ventas_core.grouping import group_sales
    >>> lines = [
    ...     RawLineRecord(100000, "A", "2024-03-01", "CREDITO", document_class="FV00"),
    ...     RawLineRecord(-30000, "A", "2024-03-03", document_class="DV00"),
    ... ]
    >>> [s.total_value for s in group_sales(lines)]
    [70000]
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from datetime import date
from typing import NamedTuple, Optional

from ventas_core.config import DEFAULT_CONFIG, EngineConfig
from ventas_core.records import RawLineRecord, SaleGroup, UniqueSale
from ventas_core.utils import (
    clean_text,
    days_between,
    normalize_customer_id,
    normalize_document_class,
    normalize_label,
    parse_sale_date,
)

logger = logging.getLogger(__name__)


class _DatedLine(NamedTuple):
    parsed_date: date
    document_class: str
    record: RawLineRecord


def partition_by_customer(
    records: Iterable[RawLineRecord],
    config: Optional[EngineConfig] = None,
) -> dict[str, list[RawLineRecord]]:
    """Partition lines by normalized customer id.

    Lines without a customer id share the ``config.unknown_label`` bucket.
    Buckets keep first-seen order, and lines keep input order within a bucket.
    """
    config = config or DEFAULT_CONFIG
    buckets: dict[str, list[RawLineRecord]] = {}
    for record in records:
        customer_id = normalize_customer_id(record.customer_id, config.unknown_label)
        buckets.setdefault(customer_id, []).append(record)
    return buckets


def can_merge(
    anchor_class: str,
    candidate_class: str,
    config: Optional[EngineConfig] = None,
) -> bool:
    """Return True if a candidate's document class may join the anchor's group.

    Sale and Credit documents pair with each other in either direction;
    any other class only merges with the exact same class.

    Examples:
        >>> can_merge("DV00", "FV00")
        True
        >>> can_merge("FV00", "NC00")
        False
    """
    config = config or DEFAULT_CONFIG
    sale = config.sale_document_class
    credit = config.credit_document_class
    if anchor_class == credit and candidate_class == sale:
        return True
    if anchor_class == sale and candidate_class == credit:
        return True
    return anchor_class == candidate_class


def _date_lines(records: list[RawLineRecord], config: EngineConfig) -> list[_DatedLine]:
    """Parse dates, drop unparseable lines and sort by date (stable)."""
    dated = []
    for record in records:
        parsed = parse_sale_date(record.date)
        if parsed is None:
            continue
        dated.append(
            _DatedLine(
                parsed,
                normalize_document_class(record.document_class, config.unknown_label),
                record,
            )
        )
    dated.sort(key=lambda line: line.parsed_date)
    return dated


def _make_group(customer_id: str, members: list[_DatedLine]) -> SaleGroup:
    return SaleGroup(
        customer_id=customer_id,
        document_class=members[0].document_class,
        records=tuple(m.record for m in members),
        min_date=members[0].parsed_date,
        max_date=max(m.parsed_date for m in members),
    )


def _walk_customer(
    customer_id: str,
    lines: list[_DatedLine],
    config: EngineConfig,
) -> Iterator[SaleGroup]:
    """Build groups from one customer's date-sorted lines."""
    consumed = [False] * len(lines)

    for i, anchor in enumerate(lines):
        if consumed[i]:
            continue
        consumed[i] = True
        members = [anchor]

        for j in range(i + 1, len(lines)):
            if consumed[j]:
                continue
            candidate = lines[j]
            if days_between(anchor.parsed_date, candidate.parsed_date) > config.max_days_difference:
                # Sorted by date, so every later line is further away
                break
            if can_merge(anchor.document_class, candidate.document_class, config):
                members.append(candidate)
                consumed[j] = True

        yield _make_group(customer_id, members)


def build_groups(
    records: Iterable[RawLineRecord],
    config: Optional[EngineConfig] = None,
) -> list[SaleGroup]:
    """Group raw lines into SaleGroups, per customer and in date order.

    Args:
        records: Raw document lines, already scoped to a period.
        config: Engine configuration. Defaults to EngineConfig().

    Returns:
        List of SaleGroup, customers in first-seen order, groups in anchor
        date order. Lines with an unparseable date belong to no group.
    """
    config = config or DEFAULT_CONFIG
    groups: list[SaleGroup] = []
    total_lines = 0
    dropped = 0

    for customer_id, customer_records in partition_by_customer(records, config).items():
        lines = _date_lines(customer_records, config)
        total_lines += len(customer_records)
        dropped += len(customer_records) - len(lines)

        if config.isolate_unknown_customers and customer_id == config.unknown_label:
            groups.extend(_make_group(customer_id, [line]) for line in lines)
            continue

        customer_groups = list(_walk_customer(customer_id, lines, config))
        logger.debug(
            "Customer %s: %d line(s) -> %d group(s)",
            customer_id,
            len(lines),
            len(customer_groups),
        )
        groups.extend(customer_groups)

    if dropped:
        logger.info("Dropped %d of %d line(s) with unparseable dates", dropped, total_lines)
    return groups


def _pick(group: SaleGroup, source: Optional[RawLineRecord], attr: str) -> Optional[str]:
    """Field value from the source line, else from the anchor."""
    if source is not None:
        value = clean_text(getattr(source, attr))
        if value:
            return value
    return clean_text(getattr(group.anchor, attr))


def promote(group: SaleGroup, config: Optional[EngineConfig] = None) -> Optional[UniqueSale]:
    """Turn a SaleGroup into a UniqueSale, or None if it does not net positive.

    Classification (sale type, payment method, advisor) comes from the first
    Sale-document member; any field it leaves blank comes from the anchor.
    """
    config = config or DEFAULT_CONFIG
    total_value = group.total_value
    if not total_value > 0:
        return None

    source = next(
        (
            r
            for r in group.records
            if normalize_document_class(r.document_class, config.unknown_label)
            == config.sale_document_class
        ),
        None,
    )
    unknown = config.unknown_label
    return UniqueSale(
        customer_id=group.customer_id,
        document_class=group.document_class,
        sale_type=normalize_label(_pick(group, source, "sale_type"), unknown),
        payment_method=normalize_label(_pick(group, source, "payment_method"), unknown),
        total_value=total_value,
        advisor_code=_pick(group, source, "advisor_code") or unknown,
        advisor_name=_pick(group, source, "advisor_name"),
        min_date=group.min_date,
        max_date=group.max_date,
        records=group.records,
    )


def group_sales(
    records: Iterable[RawLineRecord],
    config: Optional[EngineConfig] = None,
) -> list[UniqueSale]:
    """Collapse raw document lines into unique commercial sales.

    Args:
        records: Raw document lines, already scoped to a period.
        config: Engine configuration. Defaults to EngineConfig().

    Returns:
        List of UniqueSale, each with total_value > 0.
    """
    config = config or DEFAULT_CONFIG
    groups = build_groups(records, config)
    sales = [sale for sale in (promote(g, config) for g in groups) if sale is not None]
    logger.info(
        "Built %d group(s), promoted %d unique sale(s), discarded %d non-positive",
        len(groups),
        len(sales),
        len(groups) - len(sales),
    )
    return sales
