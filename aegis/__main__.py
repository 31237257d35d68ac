"""Run the API server.

Usage:
  python -m aegis [--host HOST] [--port PORT]
"""
import argparse
import sys

import uvicorn

from .config import database_url, validate_config


def main():
    parser = argparse.ArgumentParser(description="AEGIS compliance inspector API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    failed = [name for name, ok in validate_config().items() if not ok]
    if failed:
        print(f"Invalid configuration ({', '.join(failed)}) for DATABASE_URL={database_url()}", file=sys.stderr)
        raise SystemExit(2)

    uvicorn.run("aegis.main:app", host=args.host, port=args.port, reload=False)


if __name__ == "__main__":
    main()
