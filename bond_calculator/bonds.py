from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

# wire name -> attribute name
INPUT_FIELDS = {
    "faceValue": "face_value",
    "annualCouponRate": "annual_coupon_rate",
    "marketPrice": "market_price",
    "yearsToMaturity": "years_to_maturity",
    "couponFrequency": "coupon_frequency",
}


def period_count(years_to_maturity: float, coupon_frequency: int) -> int:
    """
    Number of coupon periods: years * frequency rounded half-up, never below 1.

    A fractional product (e.g. 2.3 years annual) is rounded to the nearest whole
    period so that pricing, total interest and the schedule all agree.
    """
    raw = float(years_to_maturity) * int(coupon_frequency)
    n = int(np.floor(raw + 0.5))
    return max(1, n)


def is_fractional_period_count(years_to_maturity: float, coupon_frequency: int) -> bool:
    raw = float(years_to_maturity) * int(coupon_frequency)
    return abs(raw - round(raw)) > 1e-9


@dataclass(frozen=True)
class BondInputs:
    face_value: float
    annual_coupon_rate: float  # decimal, e.g. 0.05 = 5%
    market_price: float
    years_to_maturity: float
    coupon_frequency: int = 1  # 1 = annual, 2 = semi-annual

    @property
    def annual_coupon(self) -> float:
        return self.face_value * self.annual_coupon_rate

    @property
    def periodic_coupon(self) -> float:
        return self.annual_coupon / self.coupon_frequency

    @property
    def periods(self) -> int:
        return period_count(self.years_to_maturity, self.coupon_frequency)

    @property
    def months_per_period(self) -> int:
        return int(12 / self.coupon_frequency)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "BondInputs":
        """Build from a camelCase (wire) or snake_case mapping. No range checks."""
        kwargs = {}
        for wire, attr in INPUT_FIELDS.items():
            value = payload[wire] if wire in payload else payload[attr]
            kwargs[attr] = int(value) if attr == "coupon_frequency" else float(value)
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {wire: getattr(self, attr) for wire, attr in INPUT_FIELDS.items()}


@dataclass(frozen=True)
class CashFlowRow:
    period: int
    payment_date: pd.Timestamp
    coupon_payment: float
    cumulative_interest: float
    remaining_principal: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period,
            "paymentDate": pd.Timestamp(self.payment_date).strftime("%Y-%m-%d"),
            "couponPayment": self.coupon_payment,
            "cumulativeInterest": self.cumulative_interest,
            "remainingPrincipal": self.remaining_principal,
        }


@dataclass(frozen=True)
class BondOutputs:
    current_yield: float
    ytm: Optional[float]  # None when no root is bracketed
    total_interest_earned: float
    is_premium: bool
    is_discount: bool
    cash_flow_schedule: Tuple[CashFlowRow, ...]
    flags: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Flat JSON-serialisable record."""
        return {
            "currentYield": self.current_yield,
            "ytm": self.ytm,
            "totalInterestEarned": self.total_interest_earned,
            "isPremium": self.is_premium,
            "isDiscount": self.is_discount,
            "cashFlowSchedule": [row.to_dict() for row in self.cash_flow_schedule],
            "flags": list(self.flags),
        }

    def schedule_frame(self) -> pd.DataFrame:
        return cashflow_rows_frame(self.cash_flow_schedule)


def cashflow_rows_frame(rows: Iterable[CashFlowRow]) -> pd.DataFrame:
    return pd.DataFrame(
        [(r.period, r.payment_date, r.coupon_payment, r.cumulative_interest, r.remaining_principal) for r in rows],
        columns=["period", "payment_date", "coupon_payment", "cumulative_interest", "remaining_principal"],
    )


def _discount_factors(rate: float, periods: int) -> np.ndarray:
    if periods <= 0:
        raise ValueError("periods must be positive")
    if rate <= -1.0:
        raise ValueError(f"periodic rate must be > -1 (got {rate})")

    t = np.arange(1, periods + 1, dtype=float)
    # near -100% the powers overflow to inf; the solvers only need the sign
    with np.errstate(over="ignore"):
        return np.power(1.0 + rate, -t)


def bond_price(rate: float, coupon: float, face_value: float, periods: int) -> float:
    """
    Present value of `periods` coupons of `coupon` plus `face_value` at the last
    period, discounted at the periodic rate `rate`.
    """
    dfs = _discount_factors(rate, periods)

    with np.errstate(over="ignore"):
        pv_coupons = coupon * float(np.sum(dfs)) if coupon != 0.0 else 0.0
    pv_face = face_value * float(dfs[-1])
    return pv_coupons + pv_face


def bond_price_derivative(rate: float, coupon: float, face_value: float, periods: int) -> float:
    """
    d(price)/d(rate):
      -sum(t * coupon / (1+r)^(t+1)) - n * face / (1+r)^(n+1)
    """
    dfs = _discount_factors(rate, periods)
    t = np.arange(1, periods + 1, dtype=float)
    growth = 1.0 + rate

    with np.errstate(over="ignore"):
        d_coupons = coupon * float(np.sum(t * dfs)) / growth if coupon != 0.0 else 0.0
        d_face = periods * face_value * float(dfs[-1]) / growth
    return -d_coupons - d_face
