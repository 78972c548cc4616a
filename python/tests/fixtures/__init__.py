"""
Pytest fixtures for fscatalog tests.

Fixtures are organized by test category:
- crawl.py: directory trees, walker and progress fixtures
"""
