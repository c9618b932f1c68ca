from __future__ import annotations
import uuid
from enum import Enum as PyEnum

from sqlalchemy import Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship, Mapped, mapped_column

from extensions import db

# ---------- Enums ----------
class SubstitutionStatus(str, PyEnum):
    PENDING = "pendente"
    ASSIGNED = "atribuida"
    UNAVAILABLE = "sem_disponibilidade"


def _uuid() -> str:
    return str(uuid.uuid4())


# ---------- Directory ----------
class Teacher(db.Model):
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False, index=True)
    knowledge_area: Mapped[str] = mapped_column(db.String(255), nullable=False, index=True)
    # accumulated substitute hours; capped by the assignment policy, not here
    workload: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    def __repr__(self):
        return f"<Teacher {self.name}>"


class Subject(db.Model):
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    knowledge_area: Mapped[str] = mapped_column(db.String(255), nullable=False)

    def __repr__(self):
        return f"<Subject {self.name}>"


class SchoolClass(db.Model):
    __tablename__ = "school_class"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)

    def __repr__(self):
        return f"<SchoolClass {self.name}>"


# ---------- Absences ----------
class Absence(db.Model):
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    # plain references: deleting a teacher/subject/class leaves the absence behind
    teacher_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    subject_id: Mapped[str] = mapped_column(String(36), nullable=False)
    class_id: Mapped[str] = mapped_column(String(36), nullable=False)
    weekday: Mapped[int] = mapped_column(Integer, nullable=False)  # 0=Mon .. 4=Fri
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)  # "HH:MM"
    duration: Mapped[int] = mapped_column(Integer, nullable=False)  # hours
    week: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    substitution = relationship(
        "Substitution", back_populates="absence", uselist=False, cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("ix_absence_year_week", "year", "week"),
    )

    def __repr__(self):
        return f"<Absence {self.teacher_id} w{self.week}/{self.year}>"


class Substitution(db.Model):
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    absence_id: Mapped[str] = mapped_column(
        ForeignKey("absence.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    substitute_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    status: Mapped[SubstitutionStatus] = mapped_column(
        Enum(SubstitutionStatus, name="substitution_status"),
        nullable=False, default=SubstitutionStatus.PENDING, index=True,
    )
    message: Mapped[str | None] = mapped_column(Text)

    absence = relationship("Absence", back_populates="substitution")

    def __repr__(self):
        return f"<Substitution {self.absence_id} {self.status.value}>"
