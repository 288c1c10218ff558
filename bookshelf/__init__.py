"""
Bookshelf API Application Package

Backend for a book cataloging and rating application: users sign up and log
in, publish books with a cover image, and rate each other's books once.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: SQLAlchemy engine, session factory and request dependency
- exceptions.py: Domain errors and their HTTP status codes
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection aliases (DB session, current user)
- models/: SQLAlchemy ORM models (User, Book, Rating)
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (auth, ratings, catalog, images, rate limiting)
"""

__version__ = "0.1.0"
