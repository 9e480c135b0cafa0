from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from college_match.normalize.schema import College, IncomeBracket, StudentProfile
from college_match.rank.college_scoring import get_net_price
from college_match.rank.numeric import round_half_up
from college_match.rank.policy import FinancePolicy


@dataclass(frozen=True, slots=True)
class FinancialSummary:
    college_id: str
    college_name: str
    net_price_per_year: float | None
    cost_of_attendance: float | None
    four_year_net_cost: int | None
    total_debt_estimate: int | None
    monthly_payment: int | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "college_id": self.college_id,
            "college_name": self.college_name,
            "net_price_per_year": self.net_price_per_year,
            "cost_of_attendance": self.cost_of_attendance,
            "four_year_net_cost": self.four_year_net_cost,
            "total_debt_estimate": self.total_debt_estimate,
            "monthly_payment": self.monthly_payment,
        }


def net_price_per_year(college: College, bracket: IncomeBracket | str) -> float | None:
    return get_net_price(college, bracket)


def calc_four_year_net_cost(
    net_price: float | None,
    *,
    policy: FinancePolicy | None = None,
) -> int | None:
    active = policy or FinancePolicy.baseline()
    if net_price is None:
        return None
    return round_half_up(net_price * active.years_of_study)


def estimate_debt(
    net_price: float | None,
    bracket: IncomeBracket | str,
    *,
    policy: FinancePolicy | None = None,
) -> int | None:
    """Borrowing needed once the bracket's yearly pocket capacity is spent, over the whole degree."""
    active = policy or FinancePolicy.baseline()
    if net_price is None:
        return None
    yearly_pocket = active.pocket_capacity[IncomeBracket(bracket).value]
    yearly_loan = max(0.0, net_price - yearly_pocket)
    return round_half_up(yearly_loan * active.years_of_study)


def calc_monthly_payment(principal: float, *, policy: FinancePolicy | None = None) -> int:
    """Level monthly payment on a fixed-rate loan (standard amortization)."""
    active = policy or FinancePolicy.baseline()
    if principal <= 0:
        return 0
    rate = active.monthly_rate
    if rate == 0:
        return round_half_up(principal / active.term_months)
    growth = (1 + rate) ** active.term_months
    return round_half_up(principal * (rate * growth) / (growth - 1))


def build_financial_summary(
    college: College,
    student: StudentProfile,
    *,
    policy: FinancePolicy | None = None,
) -> FinancialSummary:
    active = policy or FinancePolicy.baseline()
    # Display path only: a missing bracket falls back to the policy's neutral bracket.
    bracket = student.income_bracket or IncomeBracket(active.default_bracket)
    yearly = net_price_per_year(college, bracket)
    debt = estimate_debt(yearly, bracket, policy=active)
    return FinancialSummary(
        college_id=college.college_id,
        college_name=college.name,
        net_price_per_year=yearly,
        cost_of_attendance=college.cost_of_attendance,
        four_year_net_cost=calc_four_year_net_cost(yearly, policy=active),
        total_debt_estimate=debt,
        monthly_payment=calc_monthly_payment(debt, policy=active) if debt is not None else None,
    )
