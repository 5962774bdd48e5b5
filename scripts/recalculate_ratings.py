#!/usr/bin/env python3
"""
Recalculate Movie Ratings

Recomputes average_rating and total_reviews for every movie from its
reviews. Run it after restoring a backup, after manual SQL edits, or
when a review write succeeded but its recompute failed.

USAGE:
    python scripts/recalculate_ratings.py

    # Or with Docker
    docker-compose exec api python scripts/recalculate_ratings.py
"""

import logging
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.database import SessionLocal
from app.services.ratings import recalculate_all_movie_ratings


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s - %(message)s")

    print("=" * 60)
    print("Recalculating movie ratings...")
    print("=" * 60)

    db = SessionLocal()

    try:
        updated = recalculate_all_movie_ratings(db)
        print(f"Recalculated ratings for {updated} movies.")
    finally:
        db.close()


if __name__ == "__main__":
    main()
