import os

server_mode = os.getenv("SERVER_MODE", "development")
"""The operational mode of the server."""

database_url = os.getenv("DATABASE_URL", "sqlite://db.sqlite3")
"""The database the server persists to."""

token_secret = os.getenv("TOKEN_SECRET")
"""The HS256 secret hotel tokens are signed with."""

sentry_dsn = os.getenv("SENTRY_DSN")
"""Where to send exceptions (optional)."""

api_root = "/api/v1"
"""The base url for the api."""
