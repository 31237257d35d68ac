"""
Utility functions for the AEGIS compliance service.

Provides canonical JSON serialization, hashing, and time/text helpers.
"""

import json
import hashlib
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Union


def canonicalize(obj: Any) -> bytes:
    """
    Convert object to canonical JSON bytes.

    Canonical JSON:
    - Lexicographically sorted keys
    - No whitespace
    - UTF-8 encoded
    """
    s = json.dumps(obj, sort_keys=True, separators=(',', ':'), ensure_ascii=False, allow_nan=False)
    return s.encode('utf-8')


def sha256_hex(data: Union[bytes, str]) -> str:
    """Compute SHA-256 hash and return as hex string."""
    if isinstance(data, str):
        data = data.encode('utf-8')
    return hashlib.sha256(data).hexdigest()


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_iso(dt: datetime) -> str:
    """ISO-8601 UTC string with millisecond precision and a Z suffix."""
    return dt.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def bool_text(value: bool) -> str:
    """Lowercase textual form of a boolean ("true"/"false")."""
    return "true" if value else "false"


def number_text(value: float) -> str:
    """
    Shortest round-trip textual form of a number, laid out like JavaScript's
    Number#toString.

    The significant digits come from repr(). Values with a decimal exponent
    from -6 to 20 are written out in positional notation (1.2345678901234568e20
    -> "123456789012345680000", 1e-06 -> "0.000001"); anything outside uses an
    unpadded exponent (5e24 -> "5e+24", 1e-07 -> "1e-7").
    """
    value = float(value)
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(str(d) for d in digit_tuple).rstrip("0")
    exponent += len(digit_tuple) - len(digits)
    k = len(digits)
    n = k + exponent  # value == 0.<digits> * 10**n

    if k <= n <= 21:
        text = digits + "0" * (n - k)
    elif 0 < n <= 21:
        text = digits[:n] + "." + digits[n:]
    elif -6 < n <= 0:
        text = "0." + "0" * (-n) + digits
    else:
        e = n - 1
        mantissa = digits[0] + ("." + digits[1:] if k > 1 else "")
        text = f"{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
    return sign + text
