"""
Group expense payment summaries and UPI deep links.

Splits are computed by the backend; this module only totals each member's
shares across expenses and builds the ``upi://pay`` link used by "Pay Now".
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from urllib.parse import quote

from .config import Configuration


@dataclass(frozen=True)
class MemberPaymentSummary:
    """Paid and outstanding totals for one group member."""
    member: Mapping[str, Any]
    total_owed: Decimal
    total_paid: Decimal
    pending_count: int
    has_any_splits: bool


def _find_split(expense: Mapping[str, Any], member_id: Any) -> Mapping[str, Any] | None:
    for split in expense.get("expense_splits") or []:
        if split.get("member_id") == member_id:
            return split
    return None


def _share_amount(split: Mapping[str, Any]) -> Decimal:
    # A split without an amount yet counts as zero.
    amount = split.get("share_amount")
    if amount is None or amount == "":
        return Decimal("0")
    return Decimal(str(amount))


def summarize_payments(
    expenses: Iterable[Mapping[str, Any]],
    members: Iterable[Mapping[str, Any]],
) -> list[MemberPaymentSummary]:
    """Total each member's split shares across ``expenses``.

    Only the first split per expense matching the member counts. Shares
    may arrive as strings (numeric columns) or numbers.
    """
    expenses = list(expenses)
    summaries = []
    for member in members:
        total_owed = Decimal("0")
        total_paid = Decimal("0")
        pending_count = 0
        has_any_splits = False

        for expense in expenses:
            split = _find_split(expense, member.get("id"))
            if split is None:
                continue
            has_any_splits = True
            share = _share_amount(split)
            if split.get("is_paid"):
                total_paid += share
            else:
                total_owed += share
                pending_count += 1

        summaries.append(
            MemberPaymentSummary(
                member=member,
                total_owed=total_owed,
                total_paid=total_paid,
                pending_count=pending_count,
                has_any_splits=has_any_splits,
            )
        )
    return summaries


def build_upi_url(amount: Decimal | float | str, payments_config: Mapping[str, Any]) -> str:
    """Build the ``upi://pay`` deep link for ``amount``."""
    amount_text = format(Decimal(str(amount)).normalize(), "f")
    return (
        f"upi://pay?pa={payments_config['upi_id']}"
        f"&pn={quote(payments_config['payee_name'], safe='')}"
        f"&am={amount_text}"
        f"&cu={payments_config['currency']}"
        f"&tn={quote(payments_config['note'], safe='')}"
    )


def pay_now_url(amount: Decimal | float | str, configuration: Configuration) -> str:
    """UPI link for "Pay Now" using the ``payments`` section of config.yaml."""
    return build_upi_url(amount, configuration.get_payments_config())


def member_initials(name: str) -> str:
    """Up to two upper-case initials from a display name."""
    return "".join(part[0] for part in name.split(" ") if part).upper()[:2]
