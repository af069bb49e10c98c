"""CSV formatting of monthly projections."""
import csv
import io
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from farmledger.engine.breakeven import MonthlyProjection

CSV_HEADERS = [
    "Month",
    "Units",
    "Revenue",
    "Variable Costs",
    "Fixed Costs",
    "Total Costs",
    "Profit",
    "Cumulative Profit",
]


def _money(value: Decimal, places: int = 2) -> str:
    quantize = Decimal(10) ** -places
    return str(value.quantize(quantize, rounding=ROUND_HALF_UP))


def projections_to_csv(projections: Iterable[MonthlyProjection]) -> str:
    """One row per projected month; values rounded to 2 decimal places."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for p in projections:
        writer.writerow([
            p.month,
            _money(p.units),
            _money(p.revenue),
            _money(p.variable_costs),
            _money(p.fixed_costs),
            _money(p.total_costs),
            _money(p.profit),
            _money(p.cumulative_profit),
        ])
    return buffer.getvalue()
