"""
user_platform_tests package

Tests for the user service:

- Password hashing and verification (`test_passwords.py`)
- Token signing and verification (`test_tokens.py`)
- Login decision logic (`test_auth.py`)
- HTTP endpoints end to end (`test_api.py`)
- Settings, database startup and auth event logging
"""
