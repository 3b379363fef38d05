"""Serialization for scenarios and calculation results."""

from __future__ import annotations

import dataclasses
import hashlib
import json
import math
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from taxplan.config.schema import (
    CreditInputs,
    DeductionInputs,
    FilingProfile,
    IncomeInputs,
    PayStubSnapshot,
)
from taxplan.utils.exceptions import ScenarioError

if TYPE_CHECKING:
    from taxplan.core.engine import CalculationResult

Scenario = tuple[
    FilingProfile, IncomeInputs, DeductionInputs, CreditInputs, PayStubSnapshot | None
]


def _scenario_dict(
    profile: FilingProfile,
    income: IncomeInputs,
    deductions: DeductionInputs,
    credits: CreditInputs,
    pay_stub: PayStubSnapshot | None,
) -> dict[str, Any]:
    return {
        "profile": profile.model_dump(),
        "income": income.model_dump(),
        "deductions": deductions.model_dump(),
        "credits": credits.model_dump(),
        "pay_stub": pay_stub.model_dump() if pay_stub is not None else None,
    }


def compute_scenario_hash(
    profile: FilingProfile,
    income: IncomeInputs,
    deductions: DeductionInputs,
    credits: CreditInputs,
    pay_stub: PayStubSnapshot | None = None,
) -> str:
    """Compute a deterministic SHA-256 hash of all inputs.

    Uses canonical JSON (sorted keys, no whitespace) so the same
    logical scenario always produces the same hash.
    """
    data = _scenario_dict(profile, income, deductions, credits, pay_stub)
    canonical = json.dumps(data, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode()).hexdigest()


def dump_scenario(
    profile: FilingProfile,
    income: IncomeInputs,
    deductions: DeductionInputs,
    credits: CreditInputs,
    pay_stub: PayStubSnapshot | None = None,
) -> str:
    """Serialize a scenario's input records to a JSON string."""
    return json.dumps(_scenario_dict(profile, income, deductions, credits, pay_stub), indent=2)


def load_scenario(json_str: str) -> Scenario:
    """Deserialize a scenario from a JSON string.

    Missing sections fall back to their defaults; ``pay_stub`` may be absent
    or null.

    Raises:
        ScenarioError: If the JSON is malformed or a section fails validation.
    """
    try:
        data: dict[str, Any] = json.loads(json_str)
    except json.JSONDecodeError as exc:
        raise ScenarioError(f"scenario is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ScenarioError("scenario must be a JSON object")

    try:
        profile = FilingProfile.model_validate(data.get("profile") or {})
        income = IncomeInputs.model_validate(data.get("income") or {})
        deductions = DeductionInputs.model_validate(data.get("deductions") or {})
        credits = CreditInputs.model_validate(data.get("credits") or {})
        stub_data = data.get("pay_stub")
        pay_stub = PayStubSnapshot.model_validate(stub_data) if stub_data else None
    except ValidationError as exc:
        raise ScenarioError(f"invalid scenario: {exc}") from exc
    return profile, income, deductions, credits, pay_stub


def _json_default(value: Any) -> Any:
    if hasattr(value, "isoformat"):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _finite(value: Any) -> Any:
    """Replace infinities with None so the output is strict JSON."""
    if isinstance(value, float) and math.isinf(value):
        return None
    if isinstance(value, dict):
        return {k: _finite(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_finite(v) for v in value]
    return value


def result_to_dict(result: CalculationResult) -> dict[str, Any]:
    """Plain-dict form of a result, suitable for JSON."""
    data: dict[str, Any] = _finite(dataclasses.asdict(result))
    return data


def dump_result(result: CalculationResult) -> str:
    """Serialize a calculation result to JSON."""
    return json.dumps(result_to_dict(result), indent=2, default=_json_default)
