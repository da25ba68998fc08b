"""Stable message fingerprints for duplicate detection across sync cycles."""

import hashlib


def _normalize_body(body: str) -> str:
    """Collapse whitespace so re-delivered messages hash identically"""
    return ' '.join(body.split())


def message_fingerprint(sender: str, body: str, timestamp_millis) -> str:
    """
    Generate a fingerprint for a source message

    SHA256 of "{SENDER}|{normalized body}|{timestamp_millis}". The same
    message returned by overlapping source windows always yields the same
    value, while two identical texts received at different times do not.

    Args:
        sender: Message sender id
        body: Message text
        timestamp_millis: Message receive time

    Returns:
        64 character hex digest
    """
    signature_data = f"{sender.strip().upper()}|{_normalize_body(body)}|{timestamp_millis}"
    return hashlib.sha256(signature_data.encode('utf-8')).hexdigest()
