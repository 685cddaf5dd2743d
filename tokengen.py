"""
Issue bearer tokens for the Company Registry API.

Usage:
    python tokengen.py reader                 # read-only token
    python tokengen.py reader writer          # full access
    python tokengen.py writer --key <base64>  # override JWT_KEY
"""

import argparse
import os
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent))

from dotenv import load_dotenv
load_dotenv(os.path.join(Path(__file__).parent, ".env"))

from utils import log
from auth import JWTAuth


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Generate a signed JWT carrying the given roles")
    parser.add_argument("roles", nargs="+", help="Roles to put in the token (reader, writer)")
    parser.add_argument("--key", default=None, help="Base64 signing key (defaults to JWT_KEY)")
    args = parser.parse_args(argv)

    key = args.key or os.getenv("JWT_KEY", "")
    if not key:
        log.err("JWT_KEY env value is empty, see .env.example for configuration description")
        return 1

    try:
        auth = JWTAuth(key)
    except ValueError as e:
        log.err(str(e))
        return 1

    token = auth.issue(args.roles)
    log.summary_table("JWT generated", [
        ("Roles", ", ".join(args.roles)),
        ("Algorithm", "HS256"),
    ])
    print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main())
