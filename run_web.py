#!/usr/bin/env python3
"""Uvicorn entry point for the ConstructionDNA web service.

Runs a single worker: the engine singleton and its in-memory catalog live
in-process.
"""
from __future__ import annotations

import os

import uvicorn

from web.config import WebConfig

if __name__ == "__main__":
    is_dev = os.environ.get("CDNA_ENV", "production") == "development"

    uvicorn.run(
        "web.app:app",
        host=WebConfig.HOST,
        port=WebConfig.PORT,
        reload=is_dev,
        workers=1,
        timeout_keep_alive=30,
    )
