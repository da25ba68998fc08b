"""Resolve message senders to known banks."""

import logging
from typing import Dict, List, Optional

from ..models.core import (
    BankIdentity,
    DEFAULT_BANK_HEADERS,
    DEFAULT_BANK_NAMES,
    UNKNOWN_BANK,
)


logger = logging.getLogger(__name__)


class BankResolver:
    """Maps a sender id such as "VM-HDFCBK" to a bank.

    Header tokens are tested in declaration order and the first token that
    is a substring of the upper-cased sender wins, even if a later token
    would be a longer match.
    """

    # Stripped from tokens that have no entry in the names table
    TOKEN_SUFFIXES = ('BK', 'BNK', 'SMS')

    def __init__(self,
                 headers: Optional[List[str]] = None,
                 names: Optional[Dict[str, str]] = None):
        """
        Args:
            headers: Ordered sender header tokens. Defaults to the built-in list.
            names: Token to display name table. Defaults to the built-in table.
        """
        source = DEFAULT_BANK_HEADERS if headers is None else headers
        self.headers = [h.strip().upper() for h in source if h and h.strip()]
        table = DEFAULT_BANK_NAMES if names is None else names
        self.names = {k.upper(): v for k, v in table.items()}

    def match_token(self, sender: str) -> Optional[str]:
        """Return the first header token contained in sender, if any"""
        if not isinstance(sender, str) or not sender:
            return None

        normalized = sender.upper()
        for header in self.headers:
            if header in normalized:
                return header
        return None

    def is_bank_sender(self, sender: str) -> bool:
        return self.match_token(sender) is not None

    def resolve(self, sender: str) -> BankIdentity:
        """Resolve sender to a BankIdentity, or the "Unknown Bank" sentinel"""
        token = self.match_token(sender)
        if token is None:
            return BankIdentity(token=None, name=UNKNOWN_BANK)
        return BankIdentity(token=token, name=self.display_name(token))

    def display_name(self, token: str) -> str:
        if token in self.names:
            return self.names[token]

        for suffix in self.TOKEN_SUFFIXES:
            if token.endswith(suffix) and len(token) > len(suffix):
                return token[:-len(suffix)]
        return token
