"""
PDF verification certificates.

Renders a submission and its verdict onto a single US-letter page. The
canvas is created with invariant metadata, so two renders of the same
verdict differ only in the printed render date.
"""

import io
from datetime import datetime
from typing import Optional, Tuple

from reportlab.lib.colors import HexColor, black
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from .compliance import evaluate
from .config import CERTIFICATE_ISSUER, VERIFICATION_PROTOCOL
from .db import require_submission
from .integrity import compute_digest
from .models import Submission, Verdict
from .util import bool_text, utc_iso, utc_now

PASS_COLOR = HexColor("#22c55e")
FAIL_COLOR = HexColor("#ef4444")

MARGIN = 72
CONTENT_TYPE = "application/pdf"


def certificate_filename(submission_id: int) -> str:
    return f"AEGIS_Certificate_{submission_id}.pdf"


def render_certificate(
    submission: Submission,
    verdict: Verdict,
    now: Optional[datetime] = None
) -> bytes:
    """
    Render a verification certificate.

    Args:
        submission: The stored submission the verdict was computed for
        verdict: Result of compliance.evaluate(submission)
        now: Clock override for the printed render date

    Returns:
        PDF document bytes
    """
    buf = io.BytesIO()
    width, height = letter
    c = canvas.Canvas(buf, pagesize=letter, invariant=1)
    c.setTitle(f"{CERTIFICATE_ISSUER} #{submission.id}")
    c.setAuthor(CERTIFICATE_ISSUER)
    c.setSubject(f"{submission.labName} / {submission.modelName}")

    y = height - MARGIN
    c.setFont("Helvetica-Bold", 24)
    c.drawCentredString(width / 2, y, CERTIFICATE_ISSUER)
    y -= 48

    c.setFont("Helvetica", 12)
    for line in (
        f"Issued To: {submission.labName}",
        f"Model: {submission.modelName}",
        f"Date: {utc_iso(now or utc_now())}",
        f"Verification Protocol: {VERIFICATION_PROTOCOL}",
    ):
        c.drawString(MARGIN, y, line)
        y -= 18
    y -= 30

    c.setFont("Helvetica-Bold", 16)
    c.setFillColor(PASS_COLOR if verdict.compliant else FAIL_COLOR)
    c.drawCentredString(width / 2, y, f"STATUS: {verdict.status}")
    c.setFillColor(black)
    y -= 24

    c.setFont("Helvetica", 11)
    c.drawCentredString(
        width / 2, y,
        f"Compute below threshold: {bool_text(verdict.details.computeCheck)}    "
        f"CBRN safeguards: {bool_text(verdict.details.cbrnCheck)}"
    )
    y -= 48

    # Hex digests go on their own lines; Courier 10 fits 64 chars inside the margins
    c.setFont("Courier", 10)
    c.drawString(MARGIN, y, "CONTENT INTEGRITY DIGESTS (SHA-256):")
    y -= 18
    for label, value in (
        ("Signature:", submission.signature),
        ("Compute Hash:", compute_digest(submission.compute)),
        ("Proof Hash:", verdict.proofHash),
    ):
        c.drawString(MARGIN, y, label)
        y -= 12
        c.drawString(MARGIN + 12, y, value)
        y -= 18

    c.showPage()
    c.save()
    return buf.getvalue()


def issue_certificate(submission_id: int) -> Tuple[str, bytes]:
    """
    Resolve a submission, evaluate it and render its certificate.

    Returns:
        (download filename, PDF bytes)

    Raises:
        NotFoundError: If the id does not resolve
        StoreError: If the lookup fails
    """
    submission = require_submission(submission_id)
    verdict = evaluate(submission)
    return certificate_filename(submission.id), render_certificate(submission, verdict)
