"""Tests for debit/credit message classification."""

import pytest

from sms_budget.models.core import TransactionKind
from sms_budget.parsers.classifier import classify


class TestClassify:
    """Test cases for classify"""

    @pytest.mark.parametrize("body", [
        "Rs. 500 debited from a/c XX1234",
        "You have spent INR 250 on your card",
        "Purchase of Rs 99 at NETFLIX",
        "Rs 1,000 sent to john@upi",
        "Rs 450 paid to SWIGGY",
        "RS 450 DEBITED FROM A/C",
    ])
    def test_debit_keywords(self, body):
        assert classify(body) == TransactionKind.DEBIT

    @pytest.mark.parametrize("body", [
        "Rs. 5,000 credited to a/c XX1234",
        "You have received INR 300 from ALICE",
        "Salary of Rs 50,000 deposited in your account",
        "Rs 20 cashback added to your wallet",
    ])
    def test_credit_keywords(self, body):
        assert classify(body) == TransactionKind.CREDIT

    def test_no_keywords(self):
        assert classify("Hello, your OTP is 4532") == TransactionKind.NONE
        assert classify("Your statement is ready") == TransactionKind.NONE

    def test_debit_wins_when_both_present(self):
        """Messages with debit and credit keywords are debits"""
        body = "Rs 500 sent to BOB. BOB has received the amount"
        assert classify(body) == TransactionKind.DEBIT
        assert classify("Rs 100 credited after refund; Rs 100 debited earlier") == TransactionKind.DEBIT

    def test_empty_and_invalid_input(self):
        assert classify("") == TransactionKind.NONE
        assert classify(None) == TransactionKind.NONE
