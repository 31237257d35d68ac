"""
Compliance evaluation for lab submissions.

Checks are deterministic predicates over a stored submission. All checks
must pass for a PASS verdict; there are no partial tiers.
"""

from datetime import datetime
from typing import Optional

from .db import require_submission
from .models import Submission, Verdict, VerdictDetails
from .util import sha256_hex, bool_text, utc_now, utc_iso

# Training compute ceiling in FLOPs; compliant runs are strictly below it
COMPUTE_THRESHOLD = 1e25

PASS_STATUS = "PASS"
NON_COMPLIANT_STATUS = "FAIL - ARTICLE 88 TRIGGERED"


def check_compute(compute: float, threshold: float = COMPUTE_THRESHOLD) -> bool:
    """
    Evaluate the compute ceiling check.

    Returns:
        True if compute is strictly below the threshold
    """
    return compute < threshold


def check_cbrn(cbrn_safeguards: bool) -> bool:
    """CBRN safeguards are required unconditionally."""
    return bool(cbrn_safeguards)


def status_label(compliant: bool) -> str:
    return PASS_STATUS if compliant else NON_COMPLIANT_STATUS


def proof_hash(submission_id: int, compliant: bool) -> str:
    """Digest binding a verdict to a submission id."""
    return sha256_hex(str(submission_id) + bool_text(compliant))


def evaluate(submission: Submission, now: Optional[datetime] = None) -> Verdict:
    """
    Evaluate a submission against the fixed rule set.

    Everything except ``timestamp`` is a pure function of the submission.

    Args:
        submission: The stored submission
        now: Clock override for the verdict timestamp

    Returns:
        The verdict with per-check details
    """
    compute_ok = check_compute(submission.compute)
    cbrn_ok = check_cbrn(submission.cbrnSafeguards)
    compliant = compute_ok and cbrn_ok

    return Verdict(
        compliant=compliant,
        status=status_label(compliant),
        proofHash=proof_hash(submission.id, compliant),
        timestamp=utc_iso(now or utc_now()),
        details=VerdictDetails(computeCheck=compute_ok, cbrnCheck=cbrn_ok),
    )


def verify_submission(submission_id: int) -> Verdict:
    """
    Resolve a submission id and evaluate it.

    Raises:
        NotFoundError: If the id does not resolve
        StoreError: If the lookup fails
    """
    return evaluate(require_submission(submission_id))
