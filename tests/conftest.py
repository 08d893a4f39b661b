"""
Shared test setup.

The JWT secrets have no defaults and Settings refuses to load without them, so
the environment must be populated before any app module is imported. SQLite
in-memory keeps the suite independent of a running Postgres, and bcrypt's
minimum cost keeps hashing fast.
"""

import os

os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_ACCESS_SECRET"] = "test-access-secret-please-change-0123456789"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret-please-change-0123456789"
os.environ["JWT_ACCESS_EXPIRE_MINUTES"] = "15"
os.environ["JWT_REFRESH_EXPIRE_MINUTES"] = "10080"
os.environ["BCRYPT_SALT_OR_ROUNDS"] = "4"
