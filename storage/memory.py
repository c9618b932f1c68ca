from __future__ import annotations
import uuid
from typing import Any, Dict, List, Optional, TypeVar

from pydantic import BaseModel

from models import SubstitutionStatus
from .schemas import (
    AbsenceIn, AbsenceOut,
    SchoolClassIn, SchoolClassOut,
    SubjectIn, SubjectOut,
    SubstitutionOut,
    TeacherIn, TeacherOut,
)

R = TypeVar("R", bound=BaseModel)


def _new_id() -> str:
    return str(uuid.uuid4())


class MemoryStorage:
    """Process-local store for demos and tests. Not shared between workers."""

    name = "memory"

    def __init__(self):
        self._teachers: Dict[str, TeacherOut] = {}
        self._subjects: Dict[str, SubjectOut] = {}
        self._classes: Dict[str, SchoolClassOut] = {}
        self._absences: Dict[str, AbsenceOut] = {}
        self._substitutions: Dict[str, SubstitutionOut] = {}

    # records are handed out as copies so callers can't mutate the store
    @staticmethod
    def _get(table: Dict[str, R], key: str) -> Optional[R]:
        rec = table.get(key)
        return rec.model_copy() if rec is not None else None

    @staticmethod
    def _update(table: Dict[str, R], key: str, changes: Dict[str, Any]) -> Optional[R]:
        rec = table.get(key)
        if rec is None:
            return None
        table[key] = rec.model_copy(update=changes)
        return table[key].model_copy()

    # ---- teachers ----
    def list_teachers(self) -> List[TeacherOut]:
        return sorted((t.model_copy() for t in self._teachers.values()), key=lambda t: t.name)

    def get_teacher(self, teacher_id: str) -> Optional[TeacherOut]:
        return self._get(self._teachers, teacher_id)

    def create_teacher(self, data: TeacherIn) -> TeacherOut:
        t = TeacherOut(id=_new_id(), workload=0, **data.model_dump())
        self._teachers[t.id] = t
        return t.model_copy()

    def update_teacher(self, teacher_id: str, changes: Dict[str, Any]) -> Optional[TeacherOut]:
        return self._update(self._teachers, teacher_id, changes)

    def delete_teacher(self, teacher_id: str) -> bool:
        return self._teachers.pop(teacher_id, None) is not None

    def update_workload(self, teacher_id: str, workload: int) -> Optional[TeacherOut]:
        return self._update(self._teachers, teacher_id, {"workload": workload})

    # ---- subjects ----
    def list_subjects(self) -> List[SubjectOut]:
        return sorted((s.model_copy() for s in self._subjects.values()), key=lambda s: s.name)

    def get_subject(self, subject_id: str) -> Optional[SubjectOut]:
        return self._get(self._subjects, subject_id)

    def create_subject(self, data: SubjectIn) -> SubjectOut:
        s = SubjectOut(id=_new_id(), **data.model_dump())
        self._subjects[s.id] = s
        return s.model_copy()

    def update_subject(self, subject_id: str, changes: Dict[str, Any]) -> Optional[SubjectOut]:
        return self._update(self._subjects, subject_id, changes)

    def delete_subject(self, subject_id: str) -> bool:
        return self._subjects.pop(subject_id, None) is not None

    # ---- classes ----
    def list_classes(self) -> List[SchoolClassOut]:
        return sorted((c.model_copy() for c in self._classes.values()), key=lambda c: c.name)

    def get_class(self, class_id: str) -> Optional[SchoolClassOut]:
        return self._get(self._classes, class_id)

    def create_class(self, data: SchoolClassIn) -> SchoolClassOut:
        c = SchoolClassOut(id=_new_id(), **data.model_dump())
        self._classes[c.id] = c
        return c.model_copy()

    def update_class(self, class_id: str, changes: Dict[str, Any]) -> Optional[SchoolClassOut]:
        return self._update(self._classes, class_id, changes)

    def delete_class(self, class_id: str) -> bool:
        return self._classes.pop(class_id, None) is not None

    # ---- absences ----
    def list_absences(self) -> List[AbsenceOut]:
        return [a.model_copy() for a in self._absences.values()]

    def list_absences_by_week(self, week: int, year: int) -> List[AbsenceOut]:
        return [a.model_copy() for a in self._absences.values() if a.week == week and a.year == year]

    def get_absence(self, absence_id: str) -> Optional[AbsenceOut]:
        return self._get(self._absences, absence_id)

    def create_absence(self, data: AbsenceIn) -> AbsenceOut:
        a = AbsenceOut(id=_new_id(), **data.model_dump())
        s = SubstitutionOut(id=_new_id(), absence_id=a.id, status=SubstitutionStatus.PENDING)
        self._absences[a.id] = a
        self._substitutions[s.id] = s
        return a.model_copy()

    def delete_absence(self, absence_id: str) -> bool:
        if self._absences.pop(absence_id, None) is None:
            return False
        for sid in [s.id for s in self._substitutions.values() if s.absence_id == absence_id]:
            del self._substitutions[sid]
        return True

    # ---- substitutions ----
    def list_substitutions(self) -> List[SubstitutionOut]:
        return [s.model_copy() for s in self._substitutions.values()]

    def list_substitutions_by_week(self, week: int, year: int) -> List[SubstitutionOut]:
        ids = {a.id for a in self._absences.values() if a.week == week and a.year == year}
        return [s.model_copy() for s in self._substitutions.values() if s.absence_id in ids]

    def get_substitution(self, substitution_id: str) -> Optional[SubstitutionOut]:
        return self._get(self._substitutions, substitution_id)

    def get_substitution_by_absence(self, absence_id: str) -> Optional[SubstitutionOut]:
        for s in self._substitutions.values():
            if s.absence_id == absence_id:
                return s.model_copy()
        return None

    def resolve_substitution(
        self,
        substitution_id: str,
        status: SubstitutionStatus,
        *,
        substitute_id: Optional[str] = None,
        message: Optional[str] = None,
        expected: SubstitutionStatus = SubstitutionStatus.PENDING,
    ) -> Optional[SubstitutionOut]:
        rec = self._substitutions.get(substitution_id)
        if rec is None or rec.status != expected:
            return None
        return self._update(self._substitutions, substitution_id, {
            "status": status, "substitute_id": substitute_id, "message": message,
        })
