"""Bank SMS transaction extraction and incremental sync"""

__version__ = "0.1.0"
