"""Run the ledger API with uvicorn: ``python -m marketplace [--host H] [--port P]``."""

from __future__ import annotations

import argparse
from typing import Optional

import uvicorn


def main(argv: Optional[list[str]] = None) -> None:  # pragma: no cover
    parser = argparse.ArgumentParser(description="Serve the NFT marketplace ledger API.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args(argv)

    # configure_logging owns the handlers; uvicorn must not install its own.
    uvicorn.run("marketplace.main:app", host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":  # pragma: no cover
    main()
