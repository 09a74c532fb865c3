"""
Test Suite

This module contains all tests for the help-desk backend.

Structure:
    tests/
    ├── __init__.py              # This file
    ├── conftest.py              # Pytest fixtures (mongomock database, TestClient, accounts)
    ├── test_sla.py              # SLA breach/warning predicates
    ├── test_tokens.py           # Access token service
    ├── test_permission_guard.py # Owner/admin rules
    ├── test_*_service.py        # Service layer
    └── test_api_*.py            # HTTP endpoints

To run tests:
    pytest backend/tests
"""
