from __future__ import annotations
from typing import Any

from flask import jsonify
from pydantic import ValidationError

def ok(data: Any, status: int = 200):
    return jsonify(data), status

def created(location: str, data: Any):
    resp = jsonify(data)
    resp.status_code = 201
    resp.headers["Location"] = location
    return resp

def error(msg: str, status: int = 400, code: str | None = None, field: str | None = None, **extra):
    payload = {"error": msg}
    if code: payload["code"] = code
    if field: payload["field"] = field
    payload.update(extra)
    return jsonify(payload), status

def not_found(msg: str):
    return error(msg, status=404, code="NOT_FOUND")

def pydantic_errors_safe(ve: ValidationError):
    errs = ve.errors(include_url=False)
    for e in errs:
        # ctx may carry exception objects that jsonify can't encode
        if "ctx" in e and isinstance(e["ctx"], dict):
            e["ctx"] = {k: str(v) for k, v in e["ctx"].items()}
    return errs
