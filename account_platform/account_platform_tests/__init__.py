"""
auth_service test suite

Covers the backend logic of the authentication service:

- Password hashing, reset codes and token issuance (`auth.py`)
- Credential store over SQLAlchemy (`repository.py`)
- Registration, login and password reset orchestration (`service.py`)
- HTTP endpoints (`routes/`) through the FastAPI test client

The environment the app needs at import time is set up in `conftest.py`.
"""
