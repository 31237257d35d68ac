"""Recompute the content fingerprint of a stored submission and compare it
with the stored signature. Reads the database named by DATABASE_URL.

Usage: python tools/check_submission.py <submission_id>
"""
import sys
from aegis.db import init_db, get_submission
from aegis.integrity import verify_signature

def main(submission_id: int) -> int:
    init_db()
    submission = get_submission(submission_id)
    if submission is None:
        print("INVALID: submission not found")
        return 1
    if not verify_signature(submission.model_dump()):
        print("INVALID: signature does not match stored fields")
        return 1
    print("VALID")
    return 0

if __name__ == "__main__":
    if len(sys.argv) != 2 or not sys.argv[1].isdigit():
        print("Usage: python tools/check_submission.py <submission_id>")
        raise SystemExit(2)
    raise SystemExit(main(int(sys.argv[1])))
