# blueprints/schedule/routes.py
from __future__ import annotations
from flask import Blueprint, current_app, request

from blueprints.core.responses import ok, error
from storage import get_storage
from storage.schemas import WeekParams
from blueprints.schedule import services as svc

bp = Blueprint("schedule", __name__)

@bp.errorhandler(svc.MissingWeekError)
def _missing_week(ex: svc.MissingWeekError):
    return error(str(ex), status=400, code="MISSING_PARAMETER")

def _week_params(source) -> WeekParams:
    if not isinstance(source, dict):
        source = {}
    if source.get("semana") in (None, "") or source.get("ano") in (None, ""):
        raise svc.MissingWeekError("Semana e ano são obrigatórios")
    return WeekParams.model_validate(source)

@bp.post("/gerar-escala")
def generate():
    params = _week_params(request.get_json(silent=True) or {})
    result = svc.generate_schedule(
        get_storage(), params.week, params.year,
        max_workload=current_app.config.get("MAX_WORKLOAD_HOURS", svc.MAX_WORKLOAD_HOURS),
    )
    return ok(result.to_json())

@bp.get("/escala-semanal")
def weekly():
    params = _week_params(request.args.to_dict())
    return ok(svc.weekly_schedule(get_storage(), params.week, params.year))
