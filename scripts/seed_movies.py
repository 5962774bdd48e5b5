#!/usr/bin/env python3
"""
Movie Catalog Seed Script

Imports a sample movie catalog for development and testing.

USAGE:
    # Make sure you're in the project root with venv activated
    python scripts/seed_movies.py

    # Empty the catalog (movies, reviews, watchlist entries) first
    python scripts/seed_movies.py --clear

    # Or with Docker
    docker-compose exec api python scripts/seed_movies.py --clear

This script:
1. Connects to the database using app settings
2. Clears existing movies and their reviews (with --clear)
3. Creates the sample movies, skipping titles that already exist
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.database import SessionLocal, create_tables
from app.models import Movie, MovieGenre, Review, watchlist_items

MOVIES_DATA = [
    {
        "title": "The Shawshank Redemption",
        "description": "Two imprisoned men bond over a number of years, finding solace "
                       "and eventual redemption through acts of common decency.",
        "release_year": 1994,
        "release_month": 9,
        "genres": ["Drama"],
        "director": "Frank Darabont",
        "cast": ["Tim Robbins", "Morgan Freeman", "Bob Gunton"],
        "poster_url": "https://image.tmdb.org/t/p/w500/q6y0Go1tsGEsmtFryDOJo3dEmqu.jpg",
    },
    {
        "title": "The Godfather",
        "description": "The aging patriarch of an organized crime dynasty transfers "
                       "control of his clandestine empire to his reluctant son.",
        "release_year": 1972,
        "release_month": 3,
        "genres": ["Crime", "Drama"],
        "director": "Francis Ford Coppola",
        "cast": ["Marlon Brando", "Al Pacino", "James Caan"],
        "poster_url": "https://image.tmdb.org/t/p/w500/3bhkrj58Vtu7enYsRolD1fZdja1.jpg",
    },
    {
        "title": "Spirited Away",
        "description": "A young girl wanders into a world ruled by gods, witches and "
                       "spirits, where humans are changed into beasts.",
        "release_year": 2001,
        "release_month": 7,
        "genres": ["Animation", "Family", "Fantasy"],
        "director": "Hayao Miyazaki",
        "cast": ["Rumi Hiiragi", "Miyu Irino", "Mari Natsuki"],
        "poster_url": "https://image.tmdb.org/t/p/w500/39wmItIWsg5sZMyRUHLkWBcuVCM.jpg",
    },
    {
        "title": "Inception",
        "description": "A thief who steals corporate secrets through dream-sharing "
                       "technology is given the task of planting an idea.",
        "release_year": 2010,
        "release_month": 7,
        "genres": ["Action", "Science Fiction", "Adventure"],
        "director": "Christopher Nolan",
        "cast": ["Leonardo DiCaprio", "Joseph Gordon-Levitt", "Elliot Page"],
        "poster_url": "https://image.tmdb.org/t/p/w500/oYuLEt3zVCKq57qu2F8dT7NIa6f.jpg",
        "trailer_url": "https://www.youtube.com/watch?v=YoHD9XEInc0",
    },
    {
        "title": "Parasite",
        "description": "Greed and class discrimination threaten the newly formed "
                       "symbiotic relationship between two families.",
        "release_year": 2019,
        "release_month": 5,
        "genres": ["Comedy", "Thriller", "Drama"],
        "director": "Bong Joon-ho",
        "cast": ["Song Kang-ho", "Lee Sun-kyun", "Cho Yeo-jeong"],
        "poster_url": "https://image.tmdb.org/t/p/w500/7IiTTgloJzvGI1TAYymCfbfl3vT.jpg",
    },
    {
        "title": "Alien",
        "description": "The crew of a commercial spacecraft encounter a deadly "
                       "lifeform after investigating an unknown transmission.",
        "release_year": 1979,
        "release_month": 5,
        "genres": ["Horror", "Science Fiction"],
        "director": "Ridley Scott",
        "cast": ["Sigourney Weaver", "Tom Skerritt", "John Hurt"],
        "poster_url": "https://image.tmdb.org/t/p/w500/vfrQk5IPloGg1v9Rzbh2Eg3VGyM.jpg",
    },
    {
        "title": "The Good, the Bad and the Ugly",
        "description": "A bounty hunting scam joins two men in an uneasy alliance "
                       "against a third in a race to find a fortune in gold.",
        "release_year": 1966,
        "release_month": 12,
        "genres": ["Western"],
        "director": "Sergio Leone",
        "cast": ["Clint Eastwood", "Eli Wallach", "Lee Van Cleef"],
        "poster_url": "https://image.tmdb.org/t/p/w500/bX2xnavhMYjWDoZp1VM6VnU1xwe.jpg",
    },
    {
        "title": "Knives Out",
        "description": "A detective investigates the death of the patriarch of an "
                       "eccentric, combative family.",
        "release_year": 2019,
        "release_month": 11,
        "genres": ["Comedy", "Crime", "Mystery"],
        "director": "Rian Johnson",
        "cast": ["Daniel Craig", "Chris Evans", "Ana de Armas"],
        "poster_url": "https://image.tmdb.org/t/p/w500/pThyQovXQrw2m0s9x82twj48Jq4.jpg",
    },
]


def clear_movies(db: Session) -> None:
    """Remove every movie together with its genres, reviews and watchlist entries."""
    print("Clearing existing movies...")
    db.execute(delete(watchlist_items))
    db.execute(delete(Review))
    db.execute(delete(MovieGenre))
    db.execute(delete(Movie))
    db.commit()
    print("Catalog cleared.")


def create_movies(db: Session) -> list[Movie]:
    """Create the sample movies that are not in the catalog yet."""
    print("Creating movies...")

    existing = set(db.execute(select(Movie.title)).scalars().all())

    movies = []
    for data in MOVIES_DATA:
        if data["title"] in existing:
            print(f"  - Skipping '{data['title']}' (already exists)")
            continue

        fields = dict(data)
        genres = fields.pop("genres")

        movie = Movie(**fields)
        movie.genres = genres

        db.add(movie)
        movies.append(movie)

    db.commit()
    for movie in movies:
        db.refresh(movie)

    print(f"Created {len(movies)} movies.")
    return movies


def seed_movies(clear_existing: bool = False) -> None:
    """
    Main function to seed the movie catalog.

    Args:
        clear_existing: If True, empties the catalog before seeding.
    """
    print("=" * 60)
    print("Starting movie seed...")
    print("=" * 60)

    # Create tables if they don't exist
    create_tables()

    db = SessionLocal()

    try:
        if clear_existing:
            clear_movies(db)

        movies = create_movies(db)

        print("=" * 60)
        print("Movie seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Movies added: {len(movies)}")
        print("\nYou can now access the API at http://localhost:8000")
        print("API documentation at http://localhost:8000/docs")

    except Exception as e:
        print(f"Error seeding movies: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Import the sample movie catalog.")
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Delete all movies, reviews and watchlist entries first",
    )
    args = parser.parse_args()

    seed_movies(clear_existing=args.clear)
