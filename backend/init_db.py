#!/usr/bin/env python3
# backend/init_db.py
"""
Database initialization script.

Creates the tables and, when the store is empty, seeds the sample
portfolio (unless BOOTSTRAP_DEFAULTS=false).

This script can be run from any directory:
    python backend/init_db.py
    cd backend && python init_db.py
"""
import sys
from pathlib import Path

# Add the backend directory to Python path so 'app' package is importable
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))

from app.database import SessionLocal, init_db
from app.services.bootstrap import bootstrap_defaults
from app.utils.logging import setup_logging


def main() -> None:
    setup_logging()
    print("Creating database tables...")
    init_db()
    with SessionLocal() as db:
        seeded = bootstrap_defaults(db)
    print("Sample portfolio seeded." if seeded else "Tables ready.")


if __name__ == "__main__":
    main()
