"""
Services Package

Business logic kept out of the routers:
- security.py: Password hashing and bearer tokens
- auth.py: Signup, login, token verification, ownership checks
- books.py: Catalog CRUD and image URL rewriting
- ratings.py: One-vote-per-user ratings and average computation
- images.py: WebP compression of uploaded covers
- rate_limiter.py: slowapi rate limiting
"""
