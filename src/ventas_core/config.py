"""Engine configuration for Ventas Core.

This module provides a single configuration class used by the grouping
engine, the aggregator and the advisor classifier.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from ventas_core.exceptions import ConfigError

# Grouping window in days (inclusive)
MAX_DAYS_DIFFERENCE = 7

# Accounting document classes with cross-merge eligibility
SALE_DOCUMENT_CLASS = "FV00"
CREDIT_DOCUMENT_CLASS = "DV00"

UNKNOWN_LABEL = "UNKNOWN"

# Advisor-type buckets
INTERNAL = "INTERNAL"
EXTERNAL = "EXTERNAL"
BROKERED = "BROKERED"
ADVISOR_TYPES = (INTERNAL, EXTERNAL, BROKERED)

# House/management accounts
RESERVED_ADVISOR_CODES = ("01", "00001")
HOUSE_NAME_MARKERS = ("GENERAL", "GERENCIA")

ADVISOR_CODE_WIDTH = 5


@dataclass(frozen=True)
class EngineConfig:
    """Tunable parameters of the sales grouping engine.

    Defaults reproduce the production behaviour: a 7-day window, ``FV00`` as
    the Sale-document class and ``DV00`` as the Credit-document class.

    Attributes:
        max_days_difference: Maximum whole-day distance between a group anchor
            and a candidate line (inclusive).
        sale_document_class: Document class of point-of-sale invoices.
        credit_document_class: Document class of credit/financing documents.
        unknown_label: Fallback for missing customer ids, document classes,
            sale types, payment methods and advisor codes.
        isolate_unknown_customers: When True, lines without a customer id are
            never merged with each other; each becomes its own group.
        reserved_advisor_codes: Advisor codes always classified as INTERNAL.
        house_name_markers: Advisor-name substrings that mark a house account.
        advisor_code_width: Zero-padded width of normalized advisor codes.
    """

    max_days_difference: int = MAX_DAYS_DIFFERENCE
    sale_document_class: str = SALE_DOCUMENT_CLASS
    credit_document_class: str = CREDIT_DOCUMENT_CLASS
    unknown_label: str = UNKNOWN_LABEL
    isolate_unknown_customers: bool = False
    reserved_advisor_codes: tuple[str, ...] = RESERVED_ADVISOR_CODES
    house_name_markers: tuple[str, ...] = HOUSE_NAME_MARKERS
    advisor_code_width: int = ADVISOR_CODE_WIDTH

    def __post_init__(self) -> None:
        if self.max_days_difference < 0:
            raise ConfigError(
                f"max_days_difference must be >= 0, got {self.max_days_difference}"
            )
        if not self.sale_document_class.strip() or not self.credit_document_class.strip():
            raise ConfigError("Document class markers must not be empty")
        if (
            self.sale_document_class.strip().upper()
            == self.credit_document_class.strip().upper()
        ):
            raise ConfigError(
                f"Sale and credit document classes must differ, "
                f"both are '{self.sale_document_class}'"
            )
        if not self.unknown_label:
            raise ConfigError("unknown_label must not be empty")
        if self.advisor_code_width < 1:
            raise ConfigError(
                f"advisor_code_width must be >= 1, got {self.advisor_code_width}"
            )
        # Normalize marker casing once so comparisons stay cheap
        object.__setattr__(self, "sale_document_class", self.sale_document_class.strip().upper())
        object.__setattr__(
            self, "credit_document_class", self.credit_document_class.strip().upper()
        )
        object.__setattr__(self, "reserved_advisor_codes", tuple(self.reserved_advisor_codes))
        object.__setattr__(
            self,
            "house_name_markers",
            tuple(marker.upper() for marker in self.house_name_markers),
        )

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> EngineConfig:
        """Create an EngineConfig from a plain mapping.

        Args:
            values: Mapping of field names to values. Missing fields keep
                their defaults.

        Returns:
            EngineConfig instance.

        Raises:
            ConfigError: If the mapping has unknown keys or invalid values.

        Examples:
            >>> EngineConfig.from_mapping({"max_days_difference": 3}).max_days_difference
            3
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        kwargs = dict(values)
        for key in ("reserved_advisor_codes", "house_name_markers"):
            if key in kwargs:
                if isinstance(kwargs[key], str):
                    kwargs[key] = (kwargs[key],)
                kwargs[key] = tuple(kwargs[key])
        try:
            return cls(**kwargs)
        except (TypeError, AttributeError) as e:
            raise ConfigError(f"Invalid configuration: {e}") from e


DEFAULT_CONFIG = EngineConfig()
