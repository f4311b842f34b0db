"""
curvevault

Fractional ownership of a single asset through a dual bonding curve:
- Secondary curve below the initial issuance, primary curve above it
- Buyout auctions that token holders reject through a time-weighted
  average valuation (TWAV)
- Atomic operations over a simulated native-currency ledger
"""

__version__ = "0.1.0"
