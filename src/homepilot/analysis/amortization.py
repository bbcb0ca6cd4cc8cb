"""Amortization, percentage and rounding helpers."""

from __future__ import annotations

import math

from ..errors import InvalidInput


def monthly_payment(principal: float, annual_rate: float, years: int) -> float:
    """
    Standard fixed-rate amortization formula:
    M = L * [ r(1+r)^n / ((1+r)^n - 1) ]
    L = loan principal
    r = monthly interest rate
    n = number of payments (months)
    """
    n = int(years * 12)
    if n <= 0:
        raise InvalidInput(f"loan term must be positive, got {years} years")
    if principal <= 0:
        return 0.0
    r = annual_rate / 12.0
    if r == 0:
        return principal / n
    growth = (1 + r) ** n
    return principal * (r * growth) / (growth - 1)


def first_payment_split(principal: float, annual_rate: float, years: int) -> tuple[float, float]:
    """(principal, interest) portions of the first monthly payment."""
    payment = monthly_payment(principal, annual_rate, years)
    interest = max(principal, 0.0) * annual_rate / 12.0
    return payment - interest, interest


def principal_paid(principal: float, annual_rate: float, years: int, months: int) -> float:
    """Total principal repaid over the first ``months`` payments (equity from amortization)."""
    payment = monthly_payment(principal, annual_rate, years)
    r = annual_rate / 12.0
    balance = max(principal, 0.0)
    paid = 0.0
    for _ in range(min(months, int(years * 12))):
        interest = balance * r
        portion = min(payment - interest, balance)
        paid += portion
        balance -= portion
    return paid


def percent(part: float, whole: float) -> float | None:
    """``part / whole * 100``; None when ``whole`` is zero."""
    if whole == 0:
        return None
    return part / whole * 100.0


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from zero (``round()`` uses banker's rounding)."""
    factor = 10 ** digits
    return math.copysign(math.floor(abs(value) * factor + 0.5), value) / factor
