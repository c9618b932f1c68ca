from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError

from extensions import db
from models import Absence, SchoolClass, Subject, Substitution, SubstitutionStatus, Teacher
from .schemas import (
    AbsenceIn, AbsenceOut,
    SchoolClassIn, SchoolClassOut,
    SubjectIn, SubjectOut,
    SubstitutionOut,
    TeacherIn, TeacherOut,
)

log = logging.getLogger(__name__)


# ----------------------- row -> record -----------------------
def _teacher_out(t: Teacher) -> TeacherOut:
    return TeacherOut(id=t.id, name=t.name, knowledge_area=t.knowledge_area, workload=t.workload or 0)

def _subject_out(s: Subject) -> SubjectOut:
    return SubjectOut(id=s.id, name=s.name, knowledge_area=s.knowledge_area)

def _class_out(c: SchoolClass) -> SchoolClassOut:
    return SchoolClassOut(id=c.id, name=c.name)

def _absence_out(a: Absence) -> AbsenceOut:
    return AbsenceOut(
        id=a.id, teacher_id=a.teacher_id, subject_id=a.subject_id, class_id=a.class_id,
        weekday=a.weekday, start_time=a.start_time, duration=a.duration,
        week=a.week, year=a.year,
    )

def _substitution_out(s: Substitution) -> SubstitutionOut:
    return SubstitutionOut(
        id=s.id, absence_id=s.absence_id, substitute_id=s.substitute_id,
        status=s.status, message=s.message,
    )


def _commit() -> None:
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        log.warning("integrity error on commit, rolled back")
        raise


class DatabaseStorage:
    """Storage backed by the Flask-SQLAlchemy session; one commit per mutating call."""

    name = "database"

    # ----------------------- generic helpers -----------------------
    @staticmethod
    def _update(model, key: str, changes: Dict[str, Any]):
        row = db.session.get(model, key)
        if row is None:
            return None
        for field, value in changes.items():
            setattr(row, field, value)
        _commit()
        return row

    @staticmethod
    def _delete(model, key: str) -> bool:
        row = db.session.get(model, key)
        if row is None:
            return False
        db.session.delete(row)
        _commit()
        return True

    # ---- teachers ----
    def list_teachers(self) -> List[TeacherOut]:
        rows = db.session.query(Teacher).order_by(Teacher.name.asc()).all()
        return [_teacher_out(t) for t in rows]

    def get_teacher(self, teacher_id: str) -> Optional[TeacherOut]:
        t = db.session.get(Teacher, teacher_id)
        return _teacher_out(t) if t else None

    def create_teacher(self, data: TeacherIn) -> TeacherOut:
        t = Teacher(name=data.name, knowledge_area=data.knowledge_area, workload=0)
        db.session.add(t)
        _commit()
        return _teacher_out(t)

    def update_teacher(self, teacher_id: str, changes: Dict[str, Any]) -> Optional[TeacherOut]:
        t = self._update(Teacher, teacher_id, changes)
        return _teacher_out(t) if t else None

    def delete_teacher(self, teacher_id: str) -> bool:
        return self._delete(Teacher, teacher_id)

    def update_workload(self, teacher_id: str, workload: int) -> Optional[TeacherOut]:
        t = self._update(Teacher, teacher_id, {"workload": workload})
        return _teacher_out(t) if t else None

    # ---- subjects ----
    def list_subjects(self) -> List[SubjectOut]:
        rows = db.session.query(Subject).order_by(Subject.name.asc()).all()
        return [_subject_out(s) for s in rows]

    def get_subject(self, subject_id: str) -> Optional[SubjectOut]:
        s = db.session.get(Subject, subject_id)
        return _subject_out(s) if s else None

    def create_subject(self, data: SubjectIn) -> SubjectOut:
        s = Subject(name=data.name, knowledge_area=data.knowledge_area)
        db.session.add(s)
        _commit()
        return _subject_out(s)

    def update_subject(self, subject_id: str, changes: Dict[str, Any]) -> Optional[SubjectOut]:
        s = self._update(Subject, subject_id, changes)
        return _subject_out(s) if s else None

    def delete_subject(self, subject_id: str) -> bool:
        return self._delete(Subject, subject_id)

    # ---- classes ----
    def list_classes(self) -> List[SchoolClassOut]:
        rows = db.session.query(SchoolClass).order_by(SchoolClass.name.asc()).all()
        return [_class_out(c) for c in rows]

    def get_class(self, class_id: str) -> Optional[SchoolClassOut]:
        c = db.session.get(SchoolClass, class_id)
        return _class_out(c) if c else None

    def create_class(self, data: SchoolClassIn) -> SchoolClassOut:
        c = SchoolClass(name=data.name)
        db.session.add(c)
        _commit()
        return _class_out(c)

    def update_class(self, class_id: str, changes: Dict[str, Any]) -> Optional[SchoolClassOut]:
        c = self._update(SchoolClass, class_id, changes)
        return _class_out(c) if c else None

    def delete_class(self, class_id: str) -> bool:
        return self._delete(SchoolClass, class_id)

    # ---- absences ----
    def list_absences(self) -> List[AbsenceOut]:
        rows = (db.session.query(Absence)
                .order_by(Absence.year.asc(), Absence.week.asc(), Absence.weekday.asc(), Absence.start_time.asc())
                .all())
        return [_absence_out(a) for a in rows]

    def list_absences_by_week(self, week: int, year: int) -> List[AbsenceOut]:
        rows = (db.session.query(Absence)
                .filter(Absence.week == week, Absence.year == year)
                .order_by(Absence.weekday.asc(), Absence.start_time.asc())
                .all())
        return [_absence_out(a) for a in rows]

    def get_absence(self, absence_id: str) -> Optional[AbsenceOut]:
        a = db.session.get(Absence, absence_id)
        return _absence_out(a) if a else None

    def create_absence(self, data: AbsenceIn) -> AbsenceOut:
        a = Absence(**data.model_dump())
        # the pending substitution goes in with the absence, same commit
        a.substitution = Substitution(status=SubstitutionStatus.PENDING)
        db.session.add(a)
        _commit()
        return _absence_out(a)

    def delete_absence(self, absence_id: str) -> bool:
        # cascade on Absence.substitution removes the substitution too
        return self._delete(Absence, absence_id)

    # ---- substitutions ----
    def list_substitutions(self) -> List[SubstitutionOut]:
        return [_substitution_out(s) for s in db.session.query(Substitution).all()]

    def list_substitutions_by_week(self, week: int, year: int) -> List[SubstitutionOut]:
        rows = (db.session.query(Substitution)
                .join(Absence, Absence.id == Substitution.absence_id)
                .filter(Absence.week == week, Absence.year == year)
                .all())
        return [_substitution_out(s) for s in rows]

    def get_substitution(self, substitution_id: str) -> Optional[SubstitutionOut]:
        s = db.session.get(Substitution, substitution_id)
        return _substitution_out(s) if s else None

    def get_substitution_by_absence(self, absence_id: str) -> Optional[SubstitutionOut]:
        s = db.session.query(Substitution).filter(Substitution.absence_id == absence_id).first()
        return _substitution_out(s) if s else None

    def resolve_substitution(
        self,
        substitution_id: str,
        status: SubstitutionStatus,
        *,
        substitute_id: Optional[str] = None,
        message: Optional[str] = None,
        expected: SubstitutionStatus = SubstitutionStatus.PENDING,
    ) -> Optional[SubstitutionOut]:
        # UPDATE ... WHERE status = expected: a concurrent run that got there first wins
        res = db.session.execute(
            update(Substitution)
            .where(Substitution.id == substitution_id, Substitution.status == expected)
            .values(status=status, substitute_id=substitute_id, message=message)
        )
        _commit()
        if res.rowcount == 0:
            return None
        return self.get_substitution(substitution_id)
