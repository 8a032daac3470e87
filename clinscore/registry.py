"""
Calculator registry.

Every catalog module exposes a ``DEFINITIONS`` list; the registry indexes them
by id. Entries hold only immutable definitions, so the registry is safe to
share; each ``new_calculator`` call gets its own state.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from .calculators import (
    allergy,
    anesthesiology,
    cardiovascular,
    gastroenterology,
    general,
    icu,
    nephrology,
    neurology,
    obstetrics,
    orthopedics,
    pulmonary,
)
from .config import DEFAULTS
from .engine import Calculator, CalculatorDef
from .errors import UnknownCalculatorError
from .models import CalcInfoResult, CalculationResult

logger = logging.getLogger(__name__)

_SPECIALTY_MODULES = (
    cardiovascular, neurology, obstetrics, nephrology, pulmonary,
    gastroenterology, icu, allergy, anesthesiology, orthopedics, general,
)


def _make_calc_entry(definition: CalculatorDef, specialty: str) -> Dict[str, Any]:
    def _run(variables: Mapping[str, Any], config: Optional[Mapping[str, Any]] = None) -> CalculationResult:
        return _instantiate(definition, config).calculate(variables)

    return {
        "def": definition,
        "run": _run,
        "specialty": specialty,
    }


def _build_registry() -> Dict[str, Dict[str, Any]]:
    registry: Dict[str, Dict[str, Any]] = {}
    for module in _SPECIALTY_MODULES:
        specialty = module.__name__.rsplit(".", 1)[-1]
        for definition in module.DEFINITIONS:
            if definition.id in registry:
                raise ValueError(f"duplicate calculator id: {definition.id}")
            registry[definition.id] = _make_calc_entry(definition, specialty)
    logger.debug("registered %d calculators", len(registry))
    return registry


# ── Calculator Registry ─────────────────────────────────────────────────────

CALCULATORS: Dict[str, Dict[str, Any]] = _build_registry()


def resolve_calc_id(calc_id: str) -> str:
    """
    Map a loosely written id to a registered one.

    Tries an exact match, then a case-insensitive match with hyphens and
    spaces read as underscores. Returns the input unchanged when nothing
    matches.
    """
    if calc_id in CALCULATORS:
        return calc_id
    normalized = calc_id.strip().lower().replace("-", "_").replace(" ", "_")
    for cid in CALCULATORS:
        if cid.lower() == normalized:
            return cid
    return calc_id


def get_definition(calc_id: str) -> CalculatorDef:
    """Raises UnknownCalculatorError if ``calc_id`` is not registered."""
    entry = CALCULATORS.get(resolve_calc_id(calc_id))
    if entry is None:
        raise UnknownCalculatorError(calc_id)
    return entry["def"]


def _instantiate(definition: CalculatorDef, config: Optional[Mapping[str, Any]]) -> Calculator:
    cfg = {**DEFAULTS, **(config or {})}
    return Calculator(
        definition,
        strict_ranges=bool(cfg["strict_ranges"]),
        include_audit_trace=bool(cfg["include_audit_trace"]),
    )


def new_calculator(calc_id: str, config: Optional[Mapping[str, Any]] = None) -> Calculator:
    """A fresh Calculator with its own state, configured from ``config``."""
    return _instantiate(get_definition(calc_id), config)


def list_calculators(tag: Optional[str] = None) -> List[Dict[str, Any]]:
    """Registered calculators in registration order, optionally filtered by tag."""
    listing = []
    for cid, entry in CALCULATORS.items():
        definition = entry["def"]
        if tag is not None and tag.lower() not in definition.tags:
            continue
        listing.append({
            "id": cid,
            "title": definition.title,
            "description": definition.description,
            "version": definition.version,
            "tags": list(definition.tags),
            "specialty": entry["specialty"],
        })
    return listing


def calc_info(calc_id: str) -> CalcInfoResult:
    """Public input schema and tier table for one calculator."""
    return CalcInfoResult(**get_definition(calc_id).public_schema())
