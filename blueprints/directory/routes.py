from __future__ import annotations
import logging

from flask import request, url_for

from . import bp
from blueprints.core.responses import created, not_found, ok
from storage import get_storage
from storage.schemas import (
    AbsenceIn,
    SchoolClassIn, SchoolClassPatch,
    SubjectIn, SubjectPatch,
    TeacherIn, TeacherPatch,
    WeekParams,
    WorkloadIn,
)

log = logging.getLogger(__name__)

TEACHER_NOT_FOUND = "Professor não encontrado"
SUBJECT_NOT_FOUND = "Disciplina não encontrada"
CLASS_NOT_FOUND = "Turma não encontrada"
ABSENCE_NOT_FOUND = "Ausência não encontrada"

# ----------------------- Helpers -----------------------
def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}

def _week_filter() -> WeekParams | None:
    # both or nothing; a lone semana/ano is ignored
    if request.args.get("semana") and request.args.get("ano"):
        return WeekParams.model_validate(request.args.to_dict())
    return None

def _deleted():
    return ok({"success": True})

# ----------------------- CRUD JSON API -----------------------
# Each resource: list(GET), create(POST), get(GET /<id>), update(PATCH), delete(DELETE).

# ---- Teachers ----
@bp.get("/professores")
def api_teachers_list():
    return ok([t.to_json() for t in get_storage().list_teachers()])

@bp.post("/professores")
def api_teachers_create():
    parsed = TeacherIn.model_validate(_payload())
    t = get_storage().create_teacher(parsed)
    log.info("teacher created", extra={"event": "teacher_created", "teacher_id": t.id})
    return created(url_for("directory.api_teachers_get", id=t.id), t.to_json())

@bp.get("/professores/<id>")
def api_teachers_get(id: str):
    t = get_storage().get_teacher(id)
    return ok(t.to_json()) if t else not_found(TEACHER_NOT_FOUND)

@bp.patch("/professores/<id>")
def api_teachers_update(id: str):
    parsed = TeacherPatch.model_validate(_payload())
    t = get_storage().update_teacher(id, parsed.model_dump(exclude_unset=True, exclude_none=True))
    return ok(t.to_json()) if t else not_found(TEACHER_NOT_FOUND)

@bp.put("/professores/<id>/carga-horaria")
def api_teachers_workload(id: str):
    # manual correction; the 60h cap only applies to automatic assignment
    parsed = WorkloadIn.model_validate(_payload())
    t = get_storage().update_workload(id, parsed.workload)
    return ok(t.to_json()) if t else not_found(TEACHER_NOT_FOUND)

@bp.delete("/professores/<id>")
def api_teachers_delete(id: str):
    return _deleted() if get_storage().delete_teacher(id) else not_found(TEACHER_NOT_FOUND)

# ---- Subjects ----
@bp.get("/disciplinas")
def api_subjects_list():
    return ok([s.to_json() for s in get_storage().list_subjects()])

@bp.post("/disciplinas")
def api_subjects_create():
    parsed = SubjectIn.model_validate(_payload())
    s = get_storage().create_subject(parsed)
    return created(url_for("directory.api_subjects_get", id=s.id), s.to_json())

@bp.get("/disciplinas/<id>")
def api_subjects_get(id: str):
    s = get_storage().get_subject(id)
    return ok(s.to_json()) if s else not_found(SUBJECT_NOT_FOUND)

@bp.patch("/disciplinas/<id>")
def api_subjects_update(id: str):
    parsed = SubjectPatch.model_validate(_payload())
    s = get_storage().update_subject(id, parsed.model_dump(exclude_unset=True, exclude_none=True))
    return ok(s.to_json()) if s else not_found(SUBJECT_NOT_FOUND)

@bp.delete("/disciplinas/<id>")
def api_subjects_delete(id: str):
    return _deleted() if get_storage().delete_subject(id) else not_found(SUBJECT_NOT_FOUND)

# ---- Classes ----
@bp.get("/turmas")
def api_classes_list():
    return ok([c.to_json() for c in get_storage().list_classes()])

@bp.post("/turmas")
def api_classes_create():
    parsed = SchoolClassIn.model_validate(_payload())
    c = get_storage().create_class(parsed)
    return created(url_for("directory.api_classes_get", id=c.id), c.to_json())

@bp.get("/turmas/<id>")
def api_classes_get(id: str):
    c = get_storage().get_class(id)
    return ok(c.to_json()) if c else not_found(CLASS_NOT_FOUND)

@bp.patch("/turmas/<id>")
def api_classes_update(id: str):
    parsed = SchoolClassPatch.model_validate(_payload())
    c = get_storage().update_class(id, parsed.model_dump(exclude_unset=True, exclude_none=True))
    return ok(c.to_json()) if c else not_found(CLASS_NOT_FOUND)

@bp.delete("/turmas/<id>")
def api_classes_delete(id: str):
    return _deleted() if get_storage().delete_class(id) else not_found(CLASS_NOT_FOUND)

# ---- Absences ----
@bp.get("/ausencias")
def api_absences_list():
    storage = get_storage()
    wk = _week_filter()
    rows = storage.list_absences_by_week(wk.week, wk.year) if wk else storage.list_absences()
    return ok([a.to_json() for a in rows])

@bp.post("/ausencias")
def api_absences_create():
    parsed = AbsenceIn.model_validate(_payload())
    a = get_storage().create_absence(parsed)
    log.info("absence recorded", extra={"event": "absence_created", "absence_id": a.id,
                                        "week": a.week, "year": a.year})
    return created(url_for("directory.api_absences_get", id=a.id), a.to_json())

@bp.get("/ausencias/<id>")
def api_absences_get(id: str):
    a = get_storage().get_absence(id)
    return ok(a.to_json()) if a else not_found(ABSENCE_NOT_FOUND)

@bp.delete("/ausencias/<id>")
def api_absences_delete(id: str):
    return _deleted() if get_storage().delete_absence(id) else not_found(ABSENCE_NOT_FOUND)

# ---- Substitutions (read-only; written by the schedule run) ----
@bp.get("/substituicoes")
def api_substitutions_list():
    storage = get_storage()
    wk = _week_filter()
    rows = storage.list_substitutions_by_week(wk.week, wk.year) if wk else storage.list_substitutions()
    return ok([s.to_json() for s in rows])
