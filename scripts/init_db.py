"""
Create the weather_reports table (and apply pending migrations) on the configured database.

Usage:
  python -m scripts.init_db
  python -m scripts.init_db --echo

Connection settings come from HOMEBREW_DB_USER / _PASSWORD / _HOST / _PORT / _NAME / _DRIVER.
"""

from __future__ import annotations

import argparse
import logging
import sys

from homebrew.database import DatabaseConfig, get_engine
from homebrew.schema import bootstrap_schema


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Bootstrap the homebrew weather reports schema.")
    parser.add_argument("--echo", action="store_true", help="Log every SQL statement")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    config = DatabaseConfig.from_env()
    ok = bootstrap_schema(get_engine(config, echo=args.echo))
    print(f"Schema bootstrap {'complete' if ok else 'finished with errors'}: db={config.database} host={config.host}")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
