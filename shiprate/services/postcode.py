"""Postcode normalization for cache keys and carrier requests."""

import re
from typing import Optional

POSTCODE_LENGTH = 8

_NON_DIGITS = re.compile(r"[^0-9]")


class PostcodeNormalizer:
    """Canonicalizes free-form postcodes into a fixed-width digit string."""

    def __init__(self, length: int = POSTCODE_LENGTH):
        self.length = length

    def format(self, postcode: Optional[str] = None) -> str:
        """Strip non-digits and left-pad with zeros.

        ``format("01310-100") == "01310100"``, ``format(None) == "00000000"``.
        Digits beyond the fixed width are dropped so the result is always
        exactly ``length`` characters. Postcodes with more digits than that
        collapse together: US ZIP+4 codes "12345-6789" and "12345-6780" both
        become "12345678" and share one cache key destination.
        """
        digits = _NON_DIGITS.sub("", postcode or "")
        return digits[: self.length].rjust(self.length, "0")


# Module-level singleton
postcode_normalizer = PostcodeNormalizer()
