"""
API Routers Package

This package contains FastAPI routers that handle API endpoints.

Router Structure:
- movies.py: /api/v1/movies/* endpoints (catalog)
- reviews.py: /api/v1/reviews/* and /api/v1/movies/{id}/reviews endpoints
- auth.py: /api/v1/auth/* endpoints (registration, login)
- users.py: /api/v1/users/* endpoints (profile, watchlist, administration)

Each router is imported and registered in main.py.
"""

from app.routers.auth import router as auth_router
from app.routers.movies import router as movies_router
from app.routers.reviews import router as reviews_router
from app.routers.users import router as users_router

__all__ = [
    "movies_router",
    "reviews_router",
    "auth_router",
    "users_router",
]
