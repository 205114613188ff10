"""Shared utilities: datetime and id generators."""

from accessgate.shared.utils.datetime import ensure_utc, from_timestamp_utc, utc_now
from accessgate.shared.utils.generators import generate_cuid

__all__ = [
    "ensure_utc",
    "from_timestamp_utc",
    "generate_cuid",
    "utc_now",
]
