"""
Single entry point for running a calculator by id.

``run`` never raises for bad input or an unknown id; it always returns the
response dict ``{success, outputs, errors, warnings, audit_trace}``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from .errors import ParseError, UnknownCalculatorError
from .models import CalculationResult
from .registry import CALCULATORS, get_definition

logger = logging.getLogger(__name__)


def _ok(result: CalculationResult, units: str) -> Dict[str, Any]:
    score = result.result
    return {
        "success": True,
        "outputs": {
            "calc_id": result.calc_id,
            "total_score": score.total_score,
            "units": units,
            "tier": score.tier,
            "guidance_text": score.guidance_text,
            "citation": score.citation,
            "details": score.details,
        },
        "errors": [],
        "warnings": result.warnings,
        "audit_trace": result.audit_trace,
    }


def _err(errors, warnings=None) -> Dict[str, Any]:
    return {
        "success": False,
        "outputs": None,
        "errors": list(errors),
        "warnings": list(warnings or []),
        "audit_trace": None,
    }


def run(calc_id: str, variables: Optional[Mapping[str, Any]] = None,
        config: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Validate ``variables`` and run calculator ``calc_id``.

    Args:
        calc_id: Registered calculator id (loose spellings are resolved)
        variables: Raw inputs keyed by field id or synonym
        config: Overrides for ``strict_ranges`` / ``include_audit_trace``
    """
    try:
        definition = get_definition(calc_id)
    except UnknownCalculatorError as exc:
        logger.warning(exc.message)
        return _err([exc.to_dict()])
    if variables is not None and not isinstance(variables, Mapping):
        return _err([ParseError("variables", variables, "an object keyed by field id").to_dict()])

    result = CALCULATORS[definition.id]["run"](variables or {}, config)
    if not result.success:
        return _err(result.errors, result.warnings)
    return _ok(result, definition.units)
