"""
Ledger Kernel

A double-entry bookkeeping core with:
- Integer minor-unit Money with currency-safe arithmetic
- Balanced, immutable entries written atomically
- Account balances and trial balance derived from posted amounts
"""

__version__ = "0.1.0"
