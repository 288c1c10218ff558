"""
Test Suite for the Bookshelf API

Test Organization:
- conftest.py: Shared fixtures (test database, client, users, books, images)
- test_auth.py: Signup, login and bearer token checks
- test_books.py: /api/books catalog endpoints and ownership rules
- test_ratings.py: Average calculation, rating endpoint, best rating
- test_images.py: WebP compression of uploaded covers
- test_security.py, test_config.py, test_app.py: Supporting modules

Running Tests:
    pip install -e ".[test]"
    pytest
    pytest tests/test_ratings.py -v
"""
