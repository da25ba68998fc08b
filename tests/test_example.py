"""Example test file to verify test setup works"""

from sms_budget import __version__


def test_version():
    """Test that version is defined"""
    assert __version__ == "0.1.0"
