"""
Services Package

This package contains business logic services that are:
- Separate from HTTP handling (routers)
- Reusable across routers and maintenance scripts
- Easier to test in isolation

Current services:
- access.py: Capability checks (authenticated, owner, admin, owner_or_admin)
- rate_limiter.py: Rate limiting with slowapi
- ratings.py: Movie rating aggregation (average_rating, total_reviews)
- reviews.py: Review create/update/delete and listing rules
- security.py: Password hashing and JWT utilities
"""
