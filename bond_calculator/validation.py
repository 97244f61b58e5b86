from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .bonds import BondInputs, INPUT_FIELDS
from .config import (
    MAX_FACE_VALUE,
    MAX_MARKET_PRICE,
    MIN_YEARS_TO_MATURITY,
    MAX_YEARS_TO_MATURITY,
    COUPON_FREQUENCIES,
)


@dataclass(frozen=True)
class ValidationFailure:
    """Structured bad-request result: one human-readable message per failed rule."""
    errors: Tuple[str, ...]
    status_code: int = 400

    def to_dict(self) -> Dict[str, Any]:
        return {"statusCode": self.status_code, "message": list(self.errors), "error": "Bad Request"}


class BondValidationError(ValueError):
    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return False
    return math.isfinite(float(value))


def _fmt(bound: float) -> str:
    return str(int(bound)) if float(bound).is_integer() else str(bound)


def _check_range(
    errors: List[str],
    name: str,
    value: float,
    positive: bool = False,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
) -> None:
    if positive and value <= 0:
        errors.append(f"{name} must be a positive number")
    if minimum is not None and value < minimum:
        errors.append(f"{name} must not be less than {_fmt(minimum)}")
    if maximum is not None and value > maximum:
        errors.append(f"{name} must not be greater than {_fmt(maximum)}")


def validate_bond_inputs(payload: Mapping[str, Any]) -> List[str]:
    """
    Field-level checks on a camelCase request payload.

    Returns a list of messages; empty means the payload can be turned into
    BondInputs and handed to the calculator.
    """
    errors: List[str] = [f"property {key} should not exist" for key in payload if key not in INPUT_FIELDS]

    rules = {
        "faceValue": dict(positive=True, maximum=MAX_FACE_VALUE),
        "annualCouponRate": dict(minimum=0.0, maximum=1.0),
        "marketPrice": dict(positive=True, maximum=MAX_MARKET_PRICE),
        "yearsToMaturity": dict(minimum=MIN_YEARS_TO_MATURITY, maximum=MAX_YEARS_TO_MATURITY),
    }

    for name, rule in rules.items():
        value = payload.get(name)
        if not _is_number(value):
            errors.append(f"{name} must be a number conforming to the specified constraints")
            continue
        _check_range(errors, name, float(value), **rule)

    freq = payload.get("couponFrequency")
    allowed = ", ".join(str(f) for f in COUPON_FREQUENCIES)
    if not _is_number(freq) or float(freq) not in COUPON_FREQUENCIES:
        errors.append(f"couponFrequency must be one of the following values: {allowed}")

    return errors


def parse_bond_inputs(payload: Mapping[str, Any]) -> BondInputs:
    """Validate and build BondInputs; raises BondValidationError on bad input."""
    errors = validate_bond_inputs(payload)
    if errors:
        raise BondValidationError(errors)
    return BondInputs.from_dict(payload)
