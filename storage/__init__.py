from __future__ import annotations
import logging

from flask import Flask, current_app

from .base import Storage
from .database import DatabaseStorage
from .memory import MemoryStorage

log = logging.getLogger(__name__)

BACKENDS = {
    "database": DatabaseStorage,
    "memory": MemoryStorage,
}


def init_storage(app: Flask) -> Storage:
    backend = (app.config.get("STORAGE_BACKEND") or "database").lower()
    try:
        factory = BACKENDS[backend]
    except KeyError:
        raise ValueError(f"unknown STORAGE_BACKEND {backend!r}, expected one of {sorted(BACKENDS)}") from None
    storage = factory()
    app.extensions["storage"] = storage
    log.info("storage backend selected", extra={"event": "storage_init", "backend": storage.name})
    return storage


def get_storage() -> Storage:
    return current_app.extensions["storage"]


__all__ = ["Storage", "DatabaseStorage", "MemoryStorage", "init_storage", "get_storage"]
