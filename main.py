"""Command-line entrypoint.

Usage:
  python main.py --database-url sqlite:///./lottery.db
"""

from lotto_ingest.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
