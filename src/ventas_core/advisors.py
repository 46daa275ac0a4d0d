"""Advisor-type resolution for the by-advisor aggregation.

Advisors are bucketed as INTERNAL (house/employee), EXTERNAL (independent
agent) or BROKERED (third-party channel). The lookup map comes from the
caller (usually built from user profiles) and is keyed by normalized advisor
code; house/management accounts are INTERNAL regardless of the map.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Union

from ventas_core.config import (
    BROKERED,
    DEFAULT_CONFIG,
    EXTERNAL,
    INTERNAL,
    EngineConfig,
)
from ventas_core.utils import clean_text, normalize_advisor_code

logger = logging.getLogger(__name__)

# Labels used by the profile tables, mapped to bucket names
ADVISOR_TYPE_ALIASES = {
    "INTERNO": INTERNAL,
    "EXTERNO": EXTERNAL,
    "CORRETAJE": BROKERED,
}

ProfileLike = Union[Mapping[str, Any], tuple[Any, Any]]


def normalize_advisor_type(label: Any) -> Optional[str]:
    """Upper-case an advisor-type label and translate known aliases.

    Returns None for blank labels. Unrecognized labels are returned
    upper-cased so callers can decide what to do with them.

    Examples:
        >>> normalize_advisor_type("corretaje")
        'BROKERED'
        >>> normalize_advisor_type("External")
        'EXTERNAL'
    """
    text = clean_text(label)
    if not text:
        return None
    upper = text.upper()
    return ADVISOR_TYPE_ALIASES.get(upper, upper)


def is_house_account(
    code: Any,
    name: Any = None,
    config: Optional[EngineConfig] = None,
) -> bool:
    """Return True for house/management accounts.

    A code is a house account if it matches a reserved code either raw or
    normalized, or if the advisor name contains a house marker.
    """
    config = config or DEFAULT_CONFIG
    raw = clean_text(code) or ""
    normalized = normalize_advisor_code(raw, config.advisor_code_width)
    reserved = set(config.reserved_advisor_codes)
    if raw in reserved or normalized in reserved:
        return True

    upper_name = (clean_text(name) or "").upper()
    return any(marker in upper_name for marker in config.house_name_markers)


def classify_advisor(
    code: Any,
    advisor_type_map: Mapping[str, str],
    name: Any = None,
    config: Optional[EngineConfig] = None,
) -> str:
    """Resolve the advisor-type bucket for an advisor code.

    Lookup order: house account → INTERNAL; map entry for the normalized
    code; map entry for the raw code; otherwise EXTERNAL.

    Args:
        code: Advisor code as found on the sale.
        advisor_type_map: Mapping of normalized advisor code to type label.
        name: Optional advisor name, checked for house markers.
        config: Engine configuration. Defaults to EngineConfig().

    Returns:
        Advisor-type label, normally one of INTERNAL, EXTERNAL, BROKERED.

    Examples:
        >>> classify_advisor("123", {"00123": "CORRETAJE"})
        'BROKERED'
        >>> classify_advisor("01", {"00001": "EXTERNO"})
        'INTERNAL'
        >>> classify_advisor("999", {})
        'EXTERNAL'
    """
    config = config or DEFAULT_CONFIG
    if is_house_account(code, name, config):
        return INTERNAL

    raw = clean_text(code) or ""
    normalized = normalize_advisor_code(raw, config.advisor_code_width)
    for key in (normalized, raw):
        label = normalize_advisor_type(advisor_type_map.get(key))
        if label:
            return label
    return EXTERNAL


def build_advisor_type_map(
    profiles: Iterable[ProfileLike],
    config: Optional[EngineConfig] = None,
) -> dict[str, str]:
    """Build a normalized advisor-code → advisor-type map.

    Args:
        profiles: ``(code, type)`` pairs, or mappings with ``codigo_asesor``
            and ``tipo_asesor`` keys (``code``/``advisor_type`` also accepted).
        config: Engine configuration. Defaults to EngineConfig().

    Returns:
        Dictionary of normalized code to bucket label. Profiles without a code
        are skipped; a missing type defaults to EXTERNAL.

    Examples:
        >>> build_advisor_type_map([("123", "interno"), ("0045", None)])
        {'00123': 'INTERNAL', '00045': 'EXTERNAL'}
    """
    config = config or DEFAULT_CONFIG
    result: dict[str, str] = {}
    for profile in profiles:
        if isinstance(profile, Mapping):
            code = profile.get("codigo_asesor", profile.get("code"))
            label = profile.get("tipo_asesor", profile.get("advisor_type"))
        else:
            code, label = profile

        if not clean_text(code):
            continue
        normalized = normalize_advisor_code(code, config.advisor_code_width)
        result[normalized] = normalize_advisor_type(label) or EXTERNAL

    logger.debug("Advisor type map built with %d entries", len(result))
    return result
