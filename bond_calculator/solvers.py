from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Tuple

import numpy as np

from .bonds import bond_price, bond_price_derivative
from .config import SolverConfig, BISECTION_DEFAULTS, NEWTON_DEFAULTS

logger = logging.getLogger(__name__)

METHODS = ("bisection", "newton", "hybrid")


@dataclass(frozen=True)
class YieldSolution:
    periodic_rate: float
    annual_rate: float
    iterations: int
    converged: bool
    method: str
    flags: Tuple[str, ...] = field(default_factory=tuple)


# ---- generic 1D root finders ----

def bisection(
    f: Callable[[float], float],
    low: float,
    high: float,
    tolerance: float,
    max_iterations: int,
) -> Optional[Tuple[float, int, bool]]:
    """
    Bracketing bisection on [low, high].

    Returns (root, iterations, converged), or None when f(low) and f(high) share
    a sign. After `max_iterations` the last midpoint is returned unconverged.
    """
    f_low = f(low)
    f_high = f(high)

    if f_low * f_high > 0:
        return None

    mid = 0.0
    for i in range(max_iterations):
        mid = (low + high) / 2.0
        value = f(mid)

        if abs(value) < tolerance:
            return mid, i + 1, True

        if np.sign(value) == np.sign(f_low):
            low = mid
        else:
            high = mid

    return mid, max_iterations, False


def newton_raphson(
    f: Callable[[float], float],
    fprime: Callable[[float], float],
    x0: float,
    tolerance: float,
    max_iterations: int,
    lower_bound: float = -1.0,
) -> Tuple[float, int, bool]:
    """
    Newton-Raphson from x0. Returns (estimate, iterations, converged).

    Converged when |f(x)| < tolerance or when a step moves x by less than
    tolerance; the second rule covers large f scales where float64 rounding
    keeps |f| above an absolute tolerance at the exact root.
    Stops early, keeping the current estimate, when the derivative is exactly
    zero or when the next step would leave (lower_bound, inf).
    """
    x = x0
    for i in range(max_iterations):
        fx = f(x)
        if abs(fx) < tolerance:
            return x, i, True

        d = fprime(x)
        if d == 0.0:
            logger.debug("Newton: zero derivative at x=%.12g after %d iterations", x, i)
            return x, i, False

        x_next = x - fx / d
        if not np.isfinite(x_next) or x_next <= lower_bound:
            logger.debug("Newton: step left the domain (x=%.12g -> %.12g)", x, x_next)
            return x, i + 1, False
        if abs(x_next - x) < tolerance:
            return x_next, i + 1, True
        x = x_next

    return x, max_iterations, abs(f(x)) < tolerance


# ---- YTM strategies ----

def _price_error(market_price: float, coupon: float, face_value: float, periods: int):
    def f(r: float) -> float:
        return bond_price(r, coupon, face_value, periods) - market_price
    return f


def _annualise(r: float, frequency: int, cfg: SolverConfig) -> Tuple[float, Tuple[str, ...]]:
    """Annual rate and flags; periodic rates at/below the clamp threshold are capped."""
    if r <= cfg.clamp_threshold:
        annual = cfg.clamp_threshold * frequency
        logger.warning(
            "YTM periodic rate %.10f at/below %g; clamped annual yield to %g",
            r, cfg.clamp_threshold, annual,
        )
        return annual, ("YTM_CLAMPED",)
    return r * frequency, ()


def ytm_bisection(
    market_price: float,
    coupon: float,
    face_value: float,
    periods: int,
    frequency: int,
    config: Optional[SolverConfig] = None,
) -> Optional[YieldSolution]:
    """
    YTM by bisection over the periodic-rate bracket [config.low, config.high].

    Returns None when the root is not bracketed (a legitimate outcome, not an
    error). A periodic rate at or below `clamp_threshold` is annualised as
    `clamp_threshold * frequency`.
    """
    cfg = config or BISECTION_DEFAULTS
    f = _price_error(market_price, coupon, face_value, periods)

    result = bisection(f, cfg.low, cfg.high, cfg.tolerance, cfg.max_iterations)
    if result is None:
        logger.debug(
            "Bisection: root not bracketed in [%g, %g] (price=%g, coupon=%g, face=%g, n=%d)",
            cfg.low, cfg.high, market_price, coupon, face_value, periods,
        )
        return None

    r, iterations, converged = result
    annual, flags = _annualise(r, frequency, cfg)
    return YieldSolution(r, annual, iterations, converged, "bisection", flags)


def ytm_newton(
    market_price: float,
    coupon: float,
    face_value: float,
    periods: int,
    frequency: int,
    config: Optional[SolverConfig] = None,
) -> YieldSolution:
    """
    YTM by Newton-Raphson with the analytic price derivative.

    Initial guess is coupon / market_price. No bracketing: the estimate after the
    iteration cap is returned as-is, so a non-converged or economically
    meaningless rate is possible. Check `converged` or use the hybrid strategy.
    The same clamp threshold as bisection applies to the annualised result.
    """
    cfg = config or NEWTON_DEFAULTS
    f = _price_error(market_price, coupon, face_value, periods)

    def fprime(r: float) -> float:
        return bond_price_derivative(r, coupon, face_value, periods)

    r, iterations, converged = newton_raphson(f, fprime, coupon / market_price, cfg.tolerance, cfg.max_iterations)
    annual, flags = _annualise(r, frequency, cfg)
    return YieldSolution(r, annual, iterations, converged, "newton", flags)


def ytm_newton_with_fallback(
    market_price: float,
    coupon: float,
    face_value: float,
    periods: int,
    frequency: int,
    newton_config: Optional[SolverConfig] = None,
    bisection_config: Optional[SolverConfig] = None,
) -> Optional[YieldSolution]:
    """
    Newton-Raphson first; bisection when Newton does not converge or converges
    outside the bisection bracket.
    """
    bis_cfg = bisection_config or BISECTION_DEFAULTS

    sol = ytm_newton(market_price, coupon, face_value, periods, frequency, newton_config)
    if sol.converged and bis_cfg.low <= sol.periodic_rate <= bis_cfg.high:
        return sol

    logger.info(
        "Newton did not produce a usable YTM (rate=%.10g, converged=%s); falling back to bisection",
        sol.periodic_rate, sol.converged,
    )
    fallback = ytm_bisection(market_price, coupon, face_value, periods, frequency, bis_cfg)
    if fallback is None:
        return None

    return replace(fallback, flags=fallback.flags + ("NEWTON_FALLBACK",))


def solve_ytm(
    market_price: float,
    coupon: float,
    face_value: float,
    periods: int,
    frequency: int,
    method: str = "bisection",
    config: Optional[SolverConfig] = None,
    fallback_config: Optional[SolverConfig] = None,
) -> Optional[YieldSolution]:
    """
    Strategy dispatch. `config` applies to the named method; for "hybrid" it
    configures the Newton pass and `fallback_config` the bisection fallback.
    """
    if method == "bisection":
        return ytm_bisection(market_price, coupon, face_value, periods, frequency, config)
    if method == "newton":
        return ytm_newton(market_price, coupon, face_value, periods, frequency, config)
    if method == "hybrid":
        return ytm_newton_with_fallback(
            market_price, coupon, face_value, periods, frequency, config, fallback_config
        )

    raise ValueError(f"Unsupported YTM method: {method!r} (expected one of {METHODS})")
