#!/usr/bin/env python
"""CLI utility to verify the consistency of the token ledger."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from marketplace.core.database import session_scope
from marketplace.services.ledger_verifier import LedgerVerificationError, LedgerVerifier


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Verify token records, owner index and storage meter.")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        with session_scope() as session:
            result = LedgerVerifier(session).verify()
    except LedgerVerificationError as exc:
        logging.error("Ledger verification failed: %s", exc)
        return 1

    logging.info(
        "Ledger verified successfully: %s live tokens, %s minted, %s bytes of storage",
        result.checked,
        result.tokens_minted,
        result.storage_usage,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
