"""Structured logging: rotating application log plus JSONL audit trails."""
from __future__ import annotations

import json
import logging
import os
import threading
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional


class StructuredLogger:
    def __init__(self, log_dir: str = "data/logs", level: str = "INFO"):
        self._log_dir = log_dir
        self._write_lock = threading.Lock()
        os.makedirs(log_dir, exist_ok=True)
        self._setup_app_logger(level)

    def _setup_app_logger(self, level: str) -> None:
        self._app_logger = logging.getLogger("cdna." + str(id(self)))
        if not self._app_logger.handlers:
            handler = RotatingFileHandler(
                os.path.join(self._log_dir, "app.log"),
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
            )
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            )
            self._app_logger.addHandler(handler)
            self._app_logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    @property
    def app(self) -> logging.Logger:
        return self._app_logger

    @property
    def log_dir(self) -> str:
        return self._log_dir

    def close(self) -> None:
        for handler in list(self._app_logger.handlers):
            handler.close()
            self._app_logger.removeHandler(handler)

    def _write_jsonl(self, filename: str, record: dict) -> None:
        line = json.dumps(record, ensure_ascii=False, default=str) + "\n"
        with self._write_lock:
            with open(os.path.join(self._log_dir, filename), "a", encoding="utf-8") as f:
                f.write(line)

    def log_operation(
        self,
        event_type: str,
        user_action: str = "",
        data: Optional[dict] = None,
        metadata: Optional[dict] = None,
    ) -> None:
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": event_type,
            "user_action": user_action,
            "data": data or {},
            "metadata": metadata or {},
        }
        self._write_jsonl("operations.jsonl", record)

    def log_question(
        self,
        question: str,
        intent: str,
        confidence: float,
        sources: Optional[list] = None,
        warnings: Optional[list] = None,
        metadata: Optional[dict] = None,
    ) -> None:
        """Append one answered question to ``questions.jsonl``."""
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": "question.answered",
            "question": question,
            "intent": intent,
            "confidence": confidence,
            "sources": sources or [],
            "warnings": warnings or [],
            "metadata": metadata or {},
        }
        self._write_jsonl("questions.jsonl", record)
