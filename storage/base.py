from __future__ import annotations
from typing import Any, Dict, List, Optional, Protocol

from models import SubstitutionStatus
from .schemas import (
    AbsenceIn, AbsenceOut,
    SchoolClassIn, SchoolClassOut,
    SubjectIn, SubjectOut,
    SubstitutionOut,
    TeacherIn, TeacherOut,
)


class Storage(Protocol):
    """Data-access capability consumed by the services.

    Every mutating call is its own unit of work: once it returns, the change
    is visible to later reads. ``create_absence`` and ``delete_absence`` also
    create/delete the absence's substitution in the same unit.
    """

    name: str

    # ---- teachers ----
    def list_teachers(self) -> List[TeacherOut]: ...
    def get_teacher(self, teacher_id: str) -> Optional[TeacherOut]: ...
    def create_teacher(self, data: TeacherIn) -> TeacherOut: ...
    def update_teacher(self, teacher_id: str, changes: Dict[str, Any]) -> Optional[TeacherOut]: ...
    def delete_teacher(self, teacher_id: str) -> bool: ...
    def update_workload(self, teacher_id: str, workload: int) -> Optional[TeacherOut]: ...

    # ---- subjects ----
    def list_subjects(self) -> List[SubjectOut]: ...
    def get_subject(self, subject_id: str) -> Optional[SubjectOut]: ...
    def create_subject(self, data: SubjectIn) -> SubjectOut: ...
    def update_subject(self, subject_id: str, changes: Dict[str, Any]) -> Optional[SubjectOut]: ...
    def delete_subject(self, subject_id: str) -> bool: ...

    # ---- classes ----
    def list_classes(self) -> List[SchoolClassOut]: ...
    def get_class(self, class_id: str) -> Optional[SchoolClassOut]: ...
    def create_class(self, data: SchoolClassIn) -> SchoolClassOut: ...
    def update_class(self, class_id: str, changes: Dict[str, Any]) -> Optional[SchoolClassOut]: ...
    def delete_class(self, class_id: str) -> bool: ...

    # ---- absences ----
    def list_absences(self) -> List[AbsenceOut]: ...
    def list_absences_by_week(self, week: int, year: int) -> List[AbsenceOut]: ...
    def get_absence(self, absence_id: str) -> Optional[AbsenceOut]: ...
    def create_absence(self, data: AbsenceIn) -> AbsenceOut: ...
    def delete_absence(self, absence_id: str) -> bool: ...

    # ---- substitutions ----
    def list_substitutions(self) -> List[SubstitutionOut]: ...
    def list_substitutions_by_week(self, week: int, year: int) -> List[SubstitutionOut]: ...
    def get_substitution(self, substitution_id: str) -> Optional[SubstitutionOut]: ...
    def get_substitution_by_absence(self, absence_id: str) -> Optional[SubstitutionOut]: ...
    def resolve_substitution(
        self,
        substitution_id: str,
        status: SubstitutionStatus,
        *,
        substitute_id: Optional[str] = None,
        message: Optional[str] = None,
        expected: SubstitutionStatus = SubstitutionStatus.PENDING,
    ) -> Optional[SubstitutionOut]:
        """Set status/substitute/message only if the record is still ``expected``.

        Returns the updated record, or None when the record is gone or was
        already moved out of ``expected`` by someone else.
        """
        ...
