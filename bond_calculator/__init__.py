"""
Bond Calculator

Single-bond analytics for fixed-coupon bullet bonds:
- bonds: input/output records + present-value pricing and its rate derivative
- solvers: YTM root finders (bisection, Newton-Raphson, Newton with bisection fallback)
- schedule: periodic cash-flow schedule builder
- calculator: orchestrator producing the full output record
- validation: request payload checks for the serving layer
- config: solver defaults + input bounds
- utils: calendar-month schedule dates + rounding helpers
"""
from .bonds import BondInputs, BondOutputs, CashFlowRow, bond_price, bond_price_derivative
from .calculator import BondCalculator, calculate, calculate_bond
from .config import SolverConfig
from .validation import ValidationFailure, BondValidationError

__all__ = [
    "BondInputs",
    "BondOutputs",
    "CashFlowRow",
    "bond_price",
    "bond_price_derivative",
    "BondCalculator",
    "calculate",
    "calculate_bond",
    "SolverConfig",
    "ValidationFailure",
    "BondValidationError",
]
