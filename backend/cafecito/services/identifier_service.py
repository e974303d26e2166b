# Overview: Service-layer operations for sale identifiers; builds human-readable folios.

"""
Sale folio format: <PREFIX>-<YYYYMMDD>-<random digits>, e.g. "CF-20260213-0042".

- PREFIX: 2-4 letters (store code), uppercased
- date stamp: UTC creation date
- suffix: zero-padded random number, SALE_ID_SUFFIX_DIGITS wide

NOT UNIQUE BY CONSTRUCTION: the suffix is random, so two sales on the same
day can draw the same folio. The unique constraint on sales.sale_id detects
it; the create flow does not retry (see sales_service.create_sale).
"""

from __future__ import annotations

import re
import secrets
from datetime import datetime

from cafecito.time_utils import utcnow


PREFIX_PATTERN = re.compile(r"^[A-Za-z]{2,4}$")


class IdentifierConfigError(ValueError):
    """Raised when the folio prefix or suffix width is misconfigured."""


def normalize_prefix(prefix: str) -> str:
    """Uppercase, no spaces; must be 2-4 letters."""
    normalized = (prefix or "").strip().upper()
    if not PREFIX_PATTERN.match(normalized):
        raise IdentifierConfigError(f"Sale id prefix must be 2-4 letters, got {prefix!r}")
    return normalized


def build_sale_id(
    prefix: str,
    *,
    suffix_digits: int = 4,
    now: datetime | None = None,
    suffix: int | None = None,
) -> str:
    """Build one folio candidate. Pass now/suffix to make it deterministic."""
    if suffix_digits < 1:
        raise IdentifierConfigError("suffix_digits must be >= 1")

    stamp = (now or utcnow()).strftime("%Y%m%d")
    if suffix is None:
        suffix = secrets.randbelow(10 ** suffix_digits)
    return f"{normalize_prefix(prefix)}-{stamp}-{suffix:0{suffix_digits}d}"
