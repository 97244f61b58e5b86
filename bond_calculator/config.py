from __future__ import annotations

from dataclasses import dataclass, replace as _replace


@dataclass(frozen=True)
class SolverConfig:
    """
    Root-finder knobs.

    - tolerance: absolute pricing error (currency units) accepted as a root
    - max_iterations: hard cap on solver steps
    - low/high: periodic-rate bracket (low must stay above -1)
    - clamp_threshold: periodic rates at/below this are reported as the threshold
    """
    tolerance: float = 1e-8
    max_iterations: int = 200
    low: float = -0.9999
    high: float = 1.0
    clamp_threshold: float = -0.9998

    def replace(self, **overrides) -> "SolverConfig":
        return _replace(self, **overrides)


BISECTION_DEFAULTS = SolverConfig()
NEWTON_DEFAULTS = SolverConfig(tolerance=1e-10, max_iterations=1000)

# Input bounds enforced by the validation layer
MAX_FACE_VALUE = 1_000_000_000.0
MAX_MARKET_PRICE = 1_000_000_000.0
MIN_YEARS_TO_MATURITY = 0.1
MAX_YEARS_TO_MATURITY = 100.0
COUPON_FREQUENCIES = (1, 2)

RATE_DECIMALS = 6
MONEY_DECIMALS = 4
