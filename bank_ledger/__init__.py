"""
Chequing & Savings Ledger

An in-memory banking ledger with per-kind balance rules, atomic
deposit/withdraw/open/close operations, proper financial math using
Decimal, and a hash-chained audit trail.
"""

__version__ = "1.0.0"
