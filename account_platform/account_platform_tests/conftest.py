"""
Pytest configuration for the auth service tests.

Settings are read when the app modules are imported, so the environment
has to be in place before any test module imports them.
"""
import os
import tempfile

os.environ["JWT_SECRET"] = "test-secret-key-with-at-least-32-bytes!"
# Never point the suite at a real database: tables are dropped per test
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(tempfile.gettempdir(), 'account_platform_test.db')}"
os.environ["ENVIRONMENT"] = "development"
os.environ["SHOULD_MIGRATE"] = "true"
os.environ.pop("SMTP_HOST", None)
os.environ.pop("FIREBASE_SERVICE_KEY_PATH", None)

import pytest

from account_platform.account_platform.auth_service.db import Base, engine
from account_platform.account_platform.auth_service import models  # noqa: F401


@pytest.fixture(autouse=True)
def reset_database():
    # Drop all tables and recreate them before each test
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
