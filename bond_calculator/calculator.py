from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

import pandas as pd

from .bonds import BondInputs, BondOutputs, is_fractional_period_count
from .config import SolverConfig
from .schedule import build_cashflow_schedule
from .solvers import solve_ytm, METHODS
from .utils import round_money, round_rate
from .validation import ValidationFailure, validate_bond_inputs

logger = logging.getLogger(__name__)


def calculate_bond(
    inputs: BondInputs,
    start_date: Optional[pd.Timestamp] = None,
    method: str = "bisection",
    config: Optional[SolverConfig] = None,
    fallback_config: Optional[SolverConfig] = None,
) -> BondOutputs:
    """
    Full analytics for one validated bond.

    - current yield = annual coupon / market price (6 dp)
    - ytm = annualised periodic root of price(r) = market price (6 dp), None if unsolved
    - total interest = periodic coupon * periods (4 dp)
    - premium/discount vs face value (both False at par)
    - cash-flow schedule from `start_date` (default: today)
    """
    n = inputs.periods
    periodic_coupon = inputs.periodic_coupon
    flags = []

    if is_fractional_period_count(inputs.years_to_maturity, inputs.coupon_frequency):
        flags.append("FRACTIONAL_PERIODS")
        logger.debug(
            "years_to_maturity=%g x frequency=%d is not whole; using %d periods",
            inputs.years_to_maturity, inputs.coupon_frequency, n,
        )

    current_yield = inputs.annual_coupon / inputs.market_price

    sol = solve_ytm(
        inputs.market_price,
        periodic_coupon,
        inputs.face_value,
        n,
        inputs.coupon_frequency,
        method=method,
        config=config,
        fallback_config=fallback_config,
    )

    if sol is None:
        ytm = None
        flags.append("YTM_UNSOLVED")
        logger.info(
            "No YTM bracketed for face=%g coupon_rate=%g price=%g periods=%d",
            inputs.face_value, inputs.annual_coupon_rate, inputs.market_price, n,
        )
    else:
        ytm = round_rate(sol.annual_rate)
        flags.extend(sol.flags)
        logger.debug("YTM %s: %.8f after %d iterations (converged=%s)", sol.method, sol.annual_rate, sol.iterations, sol.converged)

    schedule = build_cashflow_schedule(inputs, start_date)

    return BondOutputs(
        current_yield=round_rate(current_yield),
        ytm=ytm,
        total_interest_earned=round_money(periodic_coupon * n),
        is_premium=inputs.market_price > inputs.face_value,
        is_discount=inputs.market_price < inputs.face_value,
        cash_flow_schedule=tuple(schedule),
        flags=tuple(flags),
    )


class BondCalculator:
    """
    Entry point for a serving layer: validates a request payload, then runs
    calculate_bond with a fixed solver strategy.
    """

    def __init__(
        self,
        method: str = "bisection",
        config: Optional[SolverConfig] = None,
        fallback_config: Optional[SolverConfig] = None,
    ):
        if method not in METHODS:
            raise ValueError(f"Unsupported YTM method: {method!r} (expected one of {METHODS})")
        self.method = method
        self.config = config
        self.fallback_config = fallback_config

    def validate(self, payload: Mapping[str, Any]) -> Optional[ValidationFailure]:
        errors = validate_bond_inputs(payload)
        if errors:
            return ValidationFailure(tuple(errors))
        return None

    def calculate(
        self,
        payload: Union[BondInputs, Mapping[str, Any]],
        start_date: Optional[pd.Timestamp] = None,
    ) -> Union[BondOutputs, ValidationFailure]:
        if isinstance(payload, BondInputs):
            payload = payload.to_dict()

        failure = self.validate(payload)
        if failure is not None:
            logger.info("Rejected bond request: %s", "; ".join(failure.errors))
            return failure

        return calculate_bond(
            BondInputs.from_dict(payload), start_date, self.method, self.config, self.fallback_config
        )


def calculate(
    payload: Union[BondInputs, Mapping[str, Any]],
    start_date: Optional[pd.Timestamp] = None,
    method: str = "bisection",
) -> Union[BondOutputs, ValidationFailure]:
    """Validate then calculate; returns BondOutputs or a ValidationFailure."""
    return BondCalculator(method).calculate(payload, start_date)
