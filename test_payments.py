#!/usr/bin/env python3
"""
Tests for group payment summaries and UPI deep links.
"""

from decimal import Decimal

from travel_assistant.__main__ import pay_command
from travel_assistant.config import Configuration
from travel_assistant.payments import (
    build_upi_url,
    member_initials,
    pay_now_url,
    summarize_payments,
)

PAYMENTS_CONFIG = {
    "upi_id": "merchant@paytm",
    "payee_name": "SmartPay",
    "note": "Group Travel Payment",
    "currency": "INR",
}

MEMBERS = [
    {"id": "m1", "name": "Asha Rao"},
    {"id": "m2", "name": "Vikram"},
    {"id": "m3", "name": "Neha Kapoor"},
]

EXPENSES = [
    {
        "description": "Houseboat",
        "expense_splits": [
            {"member_id": "m1", "share_amount": "1500.50", "is_paid": True},
            {"member_id": "m2", "share_amount": "1500.50", "is_paid": False},
        ],
    },
    {
        "description": "Dinner",
        "expense_splits": [
            {"member_id": "m1", "share_amount": 400, "is_paid": False},
            {"member_id": "m2", "share_amount": "400.25", "is_paid": False},
        ],
    },
    {"description": "Pending split", "expense_splits": None},
]


def test_summarize_payments():
    summaries = {s.member["id"]: s for s in summarize_payments(EXPENSES, MEMBERS)}

    asha = summaries["m1"]
    assert asha.total_paid == Decimal("1500.50")
    assert asha.total_owed == Decimal("400")
    assert asha.pending_count == 1
    assert asha.has_any_splits

    vikram = summaries["m2"]
    assert vikram.total_paid == Decimal("0")
    assert vikram.total_owed == Decimal("1900.75")
    assert vikram.pending_count == 2

    neha = summaries["m3"]
    assert not neha.has_any_splits
    assert neha.total_owed == Decimal("0")


def test_summarize_payments_keeps_member_order():
    summaries = summarize_payments([], MEMBERS)
    assert [s.member["id"] for s in summaries] == ["m1", "m2", "m3"]
    assert all(not s.has_any_splits for s in summaries)


def test_build_upi_url():
    url = build_upi_url(Decimal("1900.75"), PAYMENTS_CONFIG)
    assert url == (
        "upi://pay?pa=merchant@paytm&pn=SmartPay&am=1900.75&cu=INR"
        "&tn=Group%20Travel%20Payment"
    )


def test_build_upi_url_normalizes_amount():
    assert "&am=400&" in build_upi_url(Decimal("400.00"), PAYMENTS_CONFIG)
    assert "&am=1500.5&" in build_upi_url(1500.50, PAYMENTS_CONFIG)


def test_member_initials():
    assert member_initials("Asha Rao") == "AR"
    assert member_initials("vikram") == "V"
    assert member_initials("Neha  Kapoor Singh") == "NK"


def test_split_without_amount_counts_as_zero():
    expenses = [
        {
            "expense_splits": [
                {"member_id": "m1", "share_amount": None, "is_paid": False},
                {"member_id": "m2", "share_amount": "250", "is_paid": False},
            ]
        }
    ]
    summaries = {s.member["id"]: s for s in summarize_payments(expenses, MEMBERS)}

    assert summaries["m1"].has_any_splits
    assert summaries["m1"].total_owed == Decimal("0")
    assert summaries["m1"].pending_count == 1
    assert summaries["m2"].total_owed == Decimal("250")


def test_pay_now_url_uses_packaged_config():
    url = pay_now_url(Decimal("400.25"), Configuration())
    assert url == (
        "upi://pay?pa=merchant@paytm&pn=SmartPay&am=400.25&cu=INR"
        "&tn=Group%20Travel%20Payment"
    )


def test_pay_command():
    config = Configuration()
    assert pay_command("/pay 1500.50", config).startswith("upi://pay?")
    assert "&am=1500.5&" in pay_command("/pay 1500.50", config)
    assert pay_command("/pay lots", config) == "Usage: /pay <amount>"
    assert pay_command("/pay", config) == "Usage: /pay <amount>"
