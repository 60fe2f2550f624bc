# src/inkwell/scripts/migrate.py
"""Apply database migrations out-of-band, before the service starts."""
from __future__ import annotations

import argparse
import os

from alembic import command
from alembic.config import Config

from inkwell.core.settings import settings

MIGRATIONS_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), "..", "..", "..", "migrations")
)


def build_config(url: str | None = None) -> Config:
    """Return an Alembic config pointed at the project migrations."""
    cfg = Config(os.path.join(MIGRATIONS_DIR, "..", "alembic.ini"))
    cfg.set_main_option("script_location", MIGRATIONS_DIR)
    # ConfigParser interpolation treats "%" specially.
    cfg.set_main_option("sqlalchemy.url", (url or settings.database_url_sync).replace("%", "%%"))
    return cfg


def run_upgrade(revision: str = "head", url: str | None = None) -> None:
    """Upgrade the configured database to ``revision``."""
    command.upgrade(build_config(url), revision)


def main() -> None:
    parser = argparse.ArgumentParser(description="Apply Inkwell database migrations")
    parser.add_argument("revision", nargs="?", default="head", help="Target revision")
    parser.add_argument("--url", default=None, help="Override database URL")
    args = parser.parse_args()
    run_upgrade(args.revision, args.url)


if __name__ == "__main__":
    main()
