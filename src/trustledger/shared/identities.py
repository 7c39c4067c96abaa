"""Helpers for opaque identities (product ids, accounts, purchase proofs).

Identities arrive as strings from the host ledger. A zero identity is the
ledger's null value and is never a valid product, account or proof.

Every identity is stored and looked up in its normalized form: surrounding
whitespace removed and ``0x``-prefixed hex lower-cased, so ``"0xABCD"`` and
``"0xabcd"`` name the same product, account or proof. Other ids keep their case.
"""

import re

_ZERO_PATTERN = re.compile(r"^(0x)?0*$", re.IGNORECASE)
_HEX_PATTERN = re.compile(r"^0x[0-9a-f]+$", re.IGNORECASE)


def normalize_identity(value):
    """Canonical text form of an identity, or None for a missing one."""
    if value is None:
        return None
    text = str(value).strip()
    if _HEX_PATTERN.match(text):
        return text.lower()
    return text


def is_zero_identity(value) -> bool:
    """True for None, blank strings, integer 0 and all-zero (optionally 0x-prefixed) strings."""
    if value is None:
        return True
    if isinstance(value, int):
        return value == 0
    text = str(value).strip()
    return not text or bool(_ZERO_PATTERN.match(text))


def same_identity(left, right) -> bool:
    """Compare two identities in their normalized form."""
    if left is None or right is None:
        return False
    return normalize_identity(left) == normalize_identity(right)
