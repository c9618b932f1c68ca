from __future__ import annotations
import json, logging
from datetime import datetime, timezone

from flask import current_app, g, jsonify, request
from flask.logging import default_handler
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException
from werkzeug.wrappers.response import Response

from extensions import db
from storage import get_storage
from . import bp
from .responses import error, pydantic_errors_safe

# extra=... keys copied into the JSON line
LOG_FIELDS = (
    "event", "path", "method", "status", "duration_ms",
    "backend", "week", "year", "generated", "failed", "absence_id", "teacher_id",
)

class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in LOG_FIELDS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

def _setup_structured_logging(app):
    # one JSON handler on the root logger; module loggers and app.logger propagate to it
    root = logging.getLogger()
    has_json = any(
        isinstance(h, logging.StreamHandler)
        and isinstance(getattr(h, "formatter", None), JSONFormatter)
        for h in root.handlers
    )
    if not has_json:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
    root.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    app.logger.removeHandler(default_handler)

@bp.record_once
def _on_register(state):
    _setup_structured_logging(state.app)

@bp.before_app_request
def _start_timer():
    g._req_start = datetime.now(timezone.utc)

@bp.after_app_request
def _log_request(response: Response):
    try:
        duration_ms = int((datetime.now(timezone.utc) - g._req_start).total_seconds() * 1000)
    except AttributeError:
        duration_ms = None
    current_app.logger.info("request handled", extra={
        "event": "http_request",
        "path": request.path,
        "method": request.method,
        "status": response.status_code,
        "duration_ms": duration_ms,
    })
    return response

# ----------------------- error handlers -----------------------
@bp.app_errorhandler(ValidationError)
def _validation_error(ve: ValidationError):
    return error("Dados inválidos", status=400, code="VALIDATION_ERROR", detail=pydantic_errors_safe(ve))

@bp.app_errorhandler(IntegrityError)
def _integrity_error(ex: IntegrityError):
    db.session.rollback()
    return error("Violação de integridade", status=409, code="INTEGRITY_ERROR")

@bp.app_errorhandler(HTTPException)
def _http_error(ex: HTTPException):
    # JSON instead of werkzeug's HTML pages
    return error(ex.description or ex.name, status=ex.code or 500, code=ex.name.upper().replace(" ", "_"))

@bp.get("/health")
def health():
    return jsonify({
        "status": "ok",
        "ts": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        "storage": get_storage().name,
    })
