from __future__ import annotations

from typing import List, Optional

import pandas as pd

from .bonds import BondInputs, CashFlowRow, cashflow_rows_frame
from .utils import schedule_start, payment_dates, round_money


def build_cashflow_schedule(inputs: BondInputs, start_date: Optional[pd.Timestamp] = None) -> List[CashFlowRow]:
    """
    Periodic coupon schedule for a fixed-coupon bullet bond.

    Coupon is constant; cumulative interest grows by exactly one coupon per
    period (no compounding). Remaining principal is the face value until the
    final period, where the bullet repayment takes it to 0.
    Monetary values are rounded to 4 dp per row; the running total is kept
    unrounded so rounding does not accumulate.
    """
    n = inputs.periods
    start = schedule_start(start_date)
    dates = payment_dates(start, n, inputs.months_per_period)

    coupon = inputs.periodic_coupon
    rows: List[CashFlowRow] = []
    cumulative = 0.0

    for period, d in enumerate(dates, start=1):
        cumulative += coupon
        rows.append(
            CashFlowRow(
                period=period,
                payment_date=d,
                coupon_payment=round_money(coupon),
                cumulative_interest=round_money(cumulative),
                remaining_principal=0.0 if period == n else float(inputs.face_value),
            )
        )

    return rows


def cashflow_table(inputs: BondInputs, start_date: Optional[pd.Timestamp] = None) -> pd.DataFrame:
    """
    Schedule as a DataFrame, with the principal redemption and total cashflow
    per period alongside the coupon columns.
    """
    out = cashflow_rows_frame(build_cashflow_schedule(inputs, start_date))

    out["principal_payment"] = 0.0
    out.loc[out.index[-1], "principal_payment"] = float(inputs.face_value)
    out["total_cashflow"] = (out["coupon_payment"] + out["principal_payment"]).round(4)
    return out
