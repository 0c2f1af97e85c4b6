#!/usr/bin/env python3
"""Mint a session token for local testing.

Usage:
  python scripts/create_session_token.py alice@example.com
  python scripts/create_session_token.py alice@example.com --name "Alice" --days 1
"""

import argparse
import sys
from datetime import timedelta
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from keydash.core.infrastructure.security.jwt import (  # noqa: E402
    create_session_token,
)


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a bearer session token")
    parser.add_argument("email")
    parser.add_argument("--name", default=None)
    parser.add_argument("--days", type=int, default=30)
    args = parser.parse_args()

    token = create_session_token(
        args.email, name=args.name, expires_delta=timedelta(days=args.days)
    )
    print(token)


if __name__ == "__main__":
    main()
