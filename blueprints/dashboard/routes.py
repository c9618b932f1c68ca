# blueprints/dashboard/routes.py
from __future__ import annotations
from flask import Blueprint, current_app

from blueprints.core.responses import ok
from storage import get_storage
from .services import dashboard_stats

bp = Blueprint("dashboard", __name__)

@bp.get("/dashboard/stats")
def stats():
    cfg = current_app.config
    return ok(dashboard_stats(
        get_storage(),
        top_n=cfg.get("DASHBOARD_TOP_TEACHERS", 5),
        timeline_points=cfg.get("DASHBOARD_TIMELINE_WEEKS", 8),
    ))
