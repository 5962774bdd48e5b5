"""
Test Suite for the Movie Reviews API

Test Organization:
- conftest.py: Shared fixtures (test database, client, sample data)
- test_access.py: Access control rules, no database involved
- test_ratings.py: Movie rating aggregation
- test_review_service.py: Review rules against the database
- test_reviews.py: /api/v1/reviews endpoints
- test_movies.py: /api/v1/movies endpoints
- test_users.py: /api/v1/users endpoints and watchlist
- test_auth.py: /api/v1/auth endpoints, health and root

Running Tests:
    # Run all tests
    pytest

    # Run with coverage
    pytest --cov=app --cov-report=html

    # Run specific file
    pytest tests/test_reviews.py

    # Run with verbose output
    pytest -v
"""
