# blueprints/schedule/services.py
"""Substitute assignment for a school week and the weekly schedule view.

Both operate on a ``Storage`` so they run the same against the database and
the in-memory backend.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from models import SubstitutionStatus
from storage import Storage
from storage.schemas import TeacherOut

log = logging.getLogger(__name__)

MAX_WORKLOAD_HOURS = 60
NO_SUBSTITUTE_MESSAGE = (
    "Nenhum professor disponível com a área de conhecimento necessária e carga horária adequada"
)


class MissingWeekError(ValueError):
    """Week or year not supplied."""


@dataclass
class ScheduleResult:
    generated: int = 0
    failed: int = 0

    def to_json(self) -> Dict[str, int]:
        return {"geradas": self.generated, "falhas": self.failed}


def _require_week(week: Optional[int], year: Optional[int]) -> None:
    if not week or not year:
        raise MissingWeekError("Semana e ano são obrigatórios")


def assigned_message(teacher: TeacherOut) -> str:
    return f"Professor {teacher.name} escalado automaticamente"


# ===== candidate selection =====
def eligible_substitutes(
    absent: TeacherOut,
    teachers: Iterable[TeacherOut],
    duration: int,
    max_workload: int = MAX_WORKLOAD_HOURS,
) -> list[TeacherOut]:
    """Same knowledge area, not the absent teacher, still under the cap after ``duration``."""
    same_area = [t for t in teachers if t.id != absent.id and t.knowledge_area == absent.knowledge_area]
    return [t for t in same_area if t.workload + duration <= max_workload]


def pick_substitute(
    absent: TeacherOut,
    teachers: Iterable[TeacherOut],
    duration: int,
    max_workload: int = MAX_WORKLOAD_HOURS,
) -> Optional[TeacherOut]:
    candidates = eligible_substitutes(absent, teachers, duration, max_workload)
    if not candidates:
        return None
    # lowest load first; name/id only make ties reproducible
    return min(candidates, key=lambda t: (t.workload, t.name, t.id))


# ===== greedy weekly run =====
def generate_schedule(
    storage: Storage,
    week: Optional[int],
    year: Optional[int],
    *,
    max_workload: int = MAX_WORKLOAD_HOURS,
) -> ScheduleResult:
    """Resolve every pending substitution of (week, year).

    Each absence is handled once: assigned to the least-loaded eligible teacher
    of the same knowledge area, or marked unavailable. Records that are no
    longer pending are left alone, so running twice is harmless. Workload
    added during the run is seen by the absences processed after it.
    """
    _require_week(week, year)

    absences = storage.list_absences_by_week(week, year)
    teachers: Dict[str, TeacherOut] = {t.id: t for t in storage.list_teachers()}
    by_absence = {s.absence_id: s for s in storage.list_substitutions()}

    result = ScheduleResult()
    for absence in absences:
        sub = by_absence.get(absence.id)
        if sub is None or sub.status != SubstitutionStatus.PENDING:
            continue

        absent = teachers.get(absence.teacher_id)
        if absent is None:
            log.warning("absent teacher not found, skipping", extra={
                "event": "absence_skipped", "absence_id": absence.id, "teacher_id": absence.teacher_id,
            })
            continue

        chosen = pick_substitute(absent, teachers.values(), absence.duration, max_workload)
        if chosen is None:
            if storage.resolve_substitution(sub.id, SubstitutionStatus.UNAVAILABLE,
                                            message=NO_SUBSTITUTE_MESSAGE) is None:
                log.warning("substitution resolved elsewhere", extra={"absence_id": absence.id})
                continue
            log.debug("no substitute available", extra={"absence_id": absence.id})
            result.failed += 1
            continue

        if storage.resolve_substitution(sub.id, SubstitutionStatus.ASSIGNED,
                                        substitute_id=chosen.id,
                                        message=assigned_message(chosen)) is None:
            log.warning("substitution resolved elsewhere", extra={"absence_id": absence.id})
            continue

        new_load = chosen.workload + absence.duration
        updated = storage.update_workload(chosen.id, new_load)
        teachers[chosen.id] = updated or chosen.model_copy(update={"workload": new_load})
        log.debug("substitute assigned", extra={"absence_id": absence.id, "teacher_id": chosen.id})
        result.generated += 1

    log.info("schedule generated", extra={
        "event": "schedule_generated", "week": week, "year": year,
        "generated": result.generated, "failed": result.failed,
    })
    return result


# ===== weekly view =====
def weekly_schedule(storage: Storage, week: Optional[int], year: Optional[int]) -> Dict[str, Any]:
    """Absences of the week joined with teacher, subject, class and substitution."""
    _require_week(week, year)

    absences = storage.list_absences_by_week(week, year)
    teachers = {t.id: t for t in storage.list_teachers()}
    subjects = {s.id: s for s in storage.list_subjects()}
    classes = {c.id: c for c in storage.list_classes()}
    subs = {s.absence_id: s for s in storage.list_substitutions_by_week(week, year)}

    def _json(rec):
        return rec.to_json() if rec is not None else None

    items = []
    for a in sorted(absences, key=lambda x: (x.weekday, x.start_time)):
        row = a.to_json()
        row["professor"] = _json(teachers.get(a.teacher_id))
        row["disciplina"] = _json(subjects.get(a.subject_id))
        row["turma"] = _json(classes.get(a.class_id))
        sub = subs.get(a.id)
        if sub is None:
            row["substituicao"] = None
        else:
            row["substituicao"] = {
                **sub.to_json(),
                "professorSubstituto": _json(teachers.get(sub.substitute_id)) if sub.substitute_id else None,
            }
        items.append(row)

    return {"semana": week, "ano": year, "ausencias": items}
