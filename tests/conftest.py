"""Test environment: in-memory SQLite, a fixed signing key, no real mail and no rate limits."""

import os

os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-for-unit-tests"
os.environ["MAIL_ENABLED"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.pop("SUPERADMIN_EMAIL", None)
os.environ.pop("SUPERADMIN_PASSWORD", None)

import userhub.core.security as security  # noqa: E402

# Minimum bcrypt cost keeps the suite fast; hashes stay valid bcrypt.
security.BCRYPT_ROUNDS = 4
