"""Tests for bank identity resolution."""

import pytest

from sms_budget.models.core import UNKNOWN_BANK
from sms_budget.parsers.bank_resolver import BankResolver


class TestBankResolver:
    """Test cases for BankResolver"""

    def setup_method(self):
        """Set up test fixtures"""
        self.resolver = BankResolver()

    @pytest.mark.parametrize("sender,expected", [
        ("HDFCBK", "HDFC Bank"),
        ("VM-HDFCBK", "HDFC Bank"),
        ("ad-hdfcbk", "HDFC Bank"),
        ("JD-SBIINB", "SBI"),
        ("BZ-ICICIB", "ICICI Bank"),
        ("AX-YESBNK", "Yes Bank"),
    ])
    def test_resolve_known_senders(self, sender, expected):
        identity = self.resolver.resolve(sender)
        assert identity.name == expected
        assert identity.is_known

    def test_unknown_sender_returns_sentinel(self):
        identity = self.resolver.resolve("AX-AMAZON")
        assert identity.name == UNKNOWN_BANK
        assert identity.token is None
        assert not identity.is_known

    def test_token_without_name_strips_suffix(self):
        """Tokens missing from the names table fall back to the cleaned token"""
        assert self.resolver.resolve("VK-PNBSMS").name == "PNB"
        assert self.resolver.resolve("VK-BOITXT").name == "BOITXT"

    def test_first_declared_token_wins(self):
        """Resolution is by declaration order, not by longest match"""
        resolver = BankResolver(headers=['SBI', 'SBIINB'], names={})
        identity = resolver.resolve("JD-SBIINB")
        assert identity.token == 'SBI'

        reversed_resolver = BankResolver(headers=['SBIINB', 'SBI'], names={})
        assert reversed_resolver.resolve("JD-SBIINB").token == 'SBIINB'

    def test_custom_names_table(self):
        resolver = BankResolver(headers=['FEDBNK'], names={'fedbnk': 'Federal Bank'})
        assert resolver.resolve("VM-FEDBNK").name == "Federal Bank"

    def test_custom_token_suffix_stripping(self):
        resolver = BankResolver(headers=['RBLBNK', 'IDFCBK'], names={})
        assert resolver.resolve("RBLBNK").name == "RBL"
        assert resolver.resolve("IDFCBK").name == "IDFC"

    def test_is_bank_sender(self):
        assert self.resolver.is_bank_sender("VM-AXISBK")
        assert not self.resolver.is_bank_sender("+919876543210")
        assert not self.resolver.is_bank_sender("")

    def test_non_string_sender(self):
        assert self.resolver.resolve(None).name == UNKNOWN_BANK
        assert not self.resolver.is_bank_sender(12345)
