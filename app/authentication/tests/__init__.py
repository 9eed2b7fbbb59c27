"""
Tests for authentication app.

This package contains test modules for:
- test_managers.py: UserManager tests
- test_models.py: User model tests
- test_services.py: RegistrationService, UserDirectoryService tests
- test_views.py: Register, login and directory endpoint tests

Usage:
    pytest app/authentication/tests/
"""
