#!/usr/bin/env python3
"""
Average Rating Repair Script

Recomputes every book's average rating from its stored ratings.

Ratings submitted at the same moment for the same book can leave a stale
average behind; this script rewrites all of them.

Usage:
    # From project root with venv activated:
    python scripts/recalculate_ratings.py
"""

import logging
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from bookshelf.database import SessionLocal
from bookshelf.services.ratings import recalculate_all_book_ratings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def main() -> None:
    logger.info("Recalculating average ratings...")
    db = SessionLocal()
    try:
        count = recalculate_all_book_ratings(db)
    finally:
        db.close()
    logger.info(f"Updated {count} books")


if __name__ == "__main__":
    main()
