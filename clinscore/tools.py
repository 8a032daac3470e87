"""
Function-calling surface over the registry.

A client discovers a calculator with ``calc_info`` and then scores it with
``execute_calc``. ``ToolHandler`` refuses ``execute_calc`` for a calculator
whose schema has not been fetched in the current session, so a model cannot
guess field names it has never seen.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Set

from . import executor, registry
from .errors import UnknownCalculatorError
from .models import CalcInfoResult, ExecuteCalcResult, ToolCall

logger = logging.getLogger(__name__)


def _function_tool(name: str, description: str, properties: Dict[str, Any],
                   required: List[str]) -> Dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": {"type": "object", "properties": properties, "required": required},
        },
    }


_CALC_ID_PARAM = {
    "type": "string",
    "description": "Registered calculator id, for example has_bled, qtc_bazett, apgar, meld or curb65",
}

TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    _function_tool(
        "calc_info",
        "Fetch a calculator's inputs (ids, kinds, units, bounds, allowed values, synonyms) "
        "and its tier table. Required before execute_calc for the same calculator.",
        {"calc_id": _CALC_ID_PARAM},
        ["calc_id"],
    ),
    _function_tool(
        "execute_calc",
        "Score a calculator. Returns total score, tier, guidance and citation, "
        "or the validation errors that blocked the calculation.",
        {
            "calc_id": _CALC_ID_PARAM,
            "variables": {
                "type": "object",
                "description": (
                    "Inputs keyed by field id or synonym. A measurement may carry its unit as "
                    "{\"value\": 2.5, \"unit\": \"mg/dL\"}; criteria take true/false; "
                    "choices take one of the listed allowed values."
                ),
            },
        },
        ["calc_id", "variables"],
    ),
]


class ToolHandler:
    """
    Per-conversation tool executor.

    ``config`` is passed through to every calculation (see ``clinscore.config``).
    """

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        self.config = dict(config or {})
        self._schemas: Dict[str, CalcInfoResult] = {}
        self._seen_this_session: Set[str] = set()
        self._dispatch: Dict[str, Callable[[Mapping[str, Any]], Dict[str, Any]]] = {
            "calc_info": self._tool_calc_info,
            "execute_calc": self._tool_execute_calc,
        }

    def reset_session(self):
        """Start a new conversation; fetched schemas stay cached but must be requested again."""
        self._seen_this_session.clear()

    def has_calc_info(self, calc_id: str) -> bool:
        return registry.resolve_calc_id(calc_id) in self._seen_this_session

    def get_cached_calc_info(self, calc_id: str) -> Optional[CalcInfoResult]:
        return self._schemas.get(registry.resolve_calc_id(calc_id))

    def list_calculators(self, tag: Optional[str] = None) -> List[Dict[str, Any]]:
        return registry.list_calculators(tag)

    def calc_info(self, calc_id: str) -> CalcInfoResult:
        """Raises UnknownCalculatorError for an unregistered id."""
        info = registry.calc_info(calc_id)
        self._schemas[info.calc_id] = info
        self._seen_this_session.add(info.calc_id)
        return info

    def execute_calc(self, calc_id: str, variables: Mapping[str, Any]) -> ExecuteCalcResult:
        if not self.has_calc_info(calc_id):
            logger.info("execute_calc refused for %s: schema not fetched this session", calc_id)
            return ExecuteCalcResult(success=False, errors=[
                f"calc_info must be called for '{calc_id}' before execute_calc; "
                "fetch the schema first so the variable names are known."
            ])
        if not isinstance(variables, Mapping):
            return ExecuteCalcResult(success=False, errors=["variables must be an object"])
        return ExecuteCalcResult(**executor.run(calc_id, variables, self.config))

    def execute_tool(self, tool_name: str, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        """Run one tool call and return a JSON-ready dict; failures come back as ``{"error": ...}``."""
        tool = self._dispatch.get(tool_name)
        if tool is None:
            return {"error": f"Unknown tool: {tool_name}"}
        if not arguments.get("calc_id"):
            return {"error": "Missing required parameter: calc_id"}
        return tool(arguments)

    def handle(self, call: ToolCall) -> Dict[str, Any]:
        return self.execute_tool(call.tool_name, call.arguments)

    def _tool_calc_info(self, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            return self.calc_info(arguments["calc_id"]).model_dump()
        except UnknownCalculatorError as exc:
            logger.warning(exc.message)
            return {"error": exc.message}

    def _tool_execute_calc(self, arguments: Mapping[str, Any]) -> Dict[str, Any]:
        return self.execute_calc(arguments["calc_id"], arguments.get("variables", {})).model_dump()


def _describe_input(entry: Mapping[str, Any]) -> str:
    fid = entry["id"]
    text = f"  - {fid}{'*' if entry.get('required') else ''}: {entry.get('label', fid)}"
    if entry.get("canonical_unit"):
        text += f" ({entry['canonical_unit']})"
    text += f" [{entry.get('type', 'number')}]"

    bounds = entry.get("constraints", {})
    if "min" in bounds or "max" in bounds:
        lo = f"{bounds['min']:g}" if "min" in bounds else ""
        hi = f"{bounds['max']:g}" if "max" in bounds else ""
        text += f" range {lo}..{hi}"
    if bounds.get("allowed_values"):
        text += " one of: " + ", ".join(bounds["allowed_values"])
    if entry.get("synonyms"):
        text += " aka " + ", ".join(entry["synonyms"])
    return text


def format_calc_info(info: CalcInfoResult) -> str:
    """Plain-text rendering of a calc_info result; required inputs are starred."""
    out = [f"Calculator: {info.title} ({info.calc_id})", "", "Inputs:"]
    out.extend(_describe_input(entry) for entry in info.inputs)
    if info.tiers:
        out += ["", "Tiers:"]
        out.extend(f"  - >= {band['lower_bound']:g}: {band['tier']}" for band in info.tiers)
    if info.citation:
        out += ["", f"Source: {info.citation}"]
    return "\n".join(out)
