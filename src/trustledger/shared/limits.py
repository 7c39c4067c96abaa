"""Numeric bounds shared across the TrustLedger domain."""

MIN_RATING = 1
MAX_RATING = 100

# Averages are stored as integers scaled by RATING_BASIS (8000 == 80.00)
RATING_BASIS = 100
AVERAGE_RATING_CEILING = MAX_RATING * RATING_BASIS

# Width of the on-ledger counters
UINT256_MAX = 2**256 - 1
