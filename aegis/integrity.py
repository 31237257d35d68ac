"""
Content fingerprints for lab submissions.

The stored ``signature`` is a SHA-256 digest of the canonical JSON of the
validated payload. It is a content-integrity fingerprint only: it is not
bound to any key or identity and proves nothing about who submitted the
record. Anyone holding the same fields can produce the same value.
"""

from typing import Any, Dict, Mapping

from .util import canonicalize, sha256_hex, number_text
from .validation import INPUT_FIELDS


def fingerprint_body(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Select the lab-supplied fields that the fingerprint covers."""
    return {
        "labName": payload["labName"],
        "modelName": payload["modelName"],
        "compute": float(payload["compute"]),
        "cbrnSafeguards": bool(payload["cbrnSafeguards"]),
    }


def content_signature(payload: Mapping[str, Any]) -> str:
    """
    Fingerprint a normalized submission payload.

    Key order in ``payload`` does not matter; extra keys are ignored.
    """
    return sha256_hex(canonicalize(fingerprint_body(payload)))


def compute_digest(compute: float) -> str:
    """Digest over the compute value alone, printed on certificates."""
    return sha256_hex(number_text(compute))


def verify_signature(submission: Mapping[str, Any]) -> bool:
    """Recompute the fingerprint of a stored record and compare it."""
    missing = [f for f in INPUT_FIELDS + ("signature",) if f not in submission]
    if missing:
        return False
    return content_signature(submission) == submission["signature"]
