"""Write the verification certificate for a stored submission to disk.
Produces the same PDF served by /api/inspection/report/{id}.

Usage: python tools/export_certificate.py <submission_id> [out_dir]
"""
import sys
from pathlib import Path
from aegis.db import init_db, NotFoundError
from aegis.certificate import issue_certificate

def main(submission_id: int, out_dir: Path) -> int:
    init_db()
    try:
        filename, pdf = issue_certificate(submission_id)
    except NotFoundError:
        print(f"FAIL: submission {submission_id} not found")
        return 1
    out_dir.mkdir(parents=True, exist_ok=True)
    out = out_dir / filename
    out.write_bytes(pdf)
    print(str(out))
    return 0

if __name__ == "__main__":
    if len(sys.argv) not in (2, 3) or not sys.argv[1].isdigit():
        print("Usage: python tools/export_certificate.py <submission_id> [out_dir]")
        raise SystemExit(2)
    out_dir = Path(sys.argv[2]) if len(sys.argv) == 3 else Path(".")
    raise SystemExit(main(int(sys.argv[1]), out_dir))
