"""
Authentication application.

Accounts, registration and the user directory. Login, logout and token
refresh come from dj-rest-auth with simplejwt tokens.

Key components:
    - User model: Custom email-based user with a display name
    - RegistrationService: Account creation with duplicate-email handling
    - UserDirectoryService: Everyone except the requester

Usage:
    from authentication.models import User
    from authentication.services import RegistrationService, UserDirectoryService
"""
