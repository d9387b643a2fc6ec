"""Web application configuration via environment variables."""
from __future__ import annotations

import os
from typing import Optional


class WebConfig:
    """Configuration for the FastAPI web service.

    All values are read from environment variables with sensible defaults.
    """

    HOST: str = os.environ.get("CDNA_HOST", "0.0.0.0")
    PORT: int = int(os.environ.get("CDNA_PORT", "8002"))
    DATA_DIR: str = os.environ.get("CDNA_DATA_DIR", "data")
    CORS_ORIGINS: list[str] = [
        origin.strip()
        for origin in os.environ.get("CDNA_CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]
    CATALOG_PATH: Optional[str] = os.environ.get("CDNA_CATALOG_PATH") or None
