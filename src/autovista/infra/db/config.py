from __future__ import annotations

import os


def database_url() -> str:
    """Connection URL for the listings database, e.g. postgresql+psycopg://..."""
    url = os.getenv("DATABASE_URL")

    if not url:
        raise RuntimeError("DATABASE_URL environment variable is not set")

    return url
