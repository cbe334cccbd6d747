"""
user_service package

Registration, login and bearer-token authentication for the user platform:

- FastAPI application factory (`main.py`)
- SQLAlchemy models, database integration and user storage (`models.py`, `db.py`, `repository.py`)
- Argon2 password hashing (`passwords.py`) and HS256 bearer tokens (`tokens.py`)
- Login decision logic and the bearer-token dependency (`auth.py`)
"""
