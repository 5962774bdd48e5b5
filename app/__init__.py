"""
Movie Reviews API Application Package

Backend for a movie review web application: users register, browse and
search movies, write reviews and keep a watchlist; admins manage the
catalog and user roles.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy database connection and session management
- exceptions.py: Domain errors and their HTTP status codes
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: SQLAlchemy ORM models
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (reviews, ratings, access control, security)
"""

__version__ = "0.1.0"
