from __future__ import annotations
import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models import SubstitutionStatus

_HHMM = re.compile(r"^([0-1]?[0-9]|2[0-3]):[0-5][0-9]$")


class WireModel(BaseModel):
    """Python names in code, the client's camelCase names on the wire."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# ---------- Teachers ----------
class TeacherIn(WireModel):
    name: str = Field(alias="nome", min_length=1, max_length=255)
    knowledge_area: str = Field(alias="areaConhecimento", min_length=1, max_length=255)

class TeacherPatch(WireModel):
    name: Optional[str] = Field(None, alias="nome", min_length=1, max_length=255)
    knowledge_area: Optional[str] = Field(None, alias="areaConhecimento", min_length=1, max_length=255)

class WorkloadIn(WireModel):
    workload: int = Field(alias="cargaHoraria", ge=0)

class TeacherOut(WireModel):
    id: str
    name: str = Field(alias="nome")
    knowledge_area: str = Field(alias="areaConhecimento")
    workload: int = Field(0, alias="cargaHoraria")


# ---------- Subjects ----------
class SubjectIn(WireModel):
    name: str = Field(alias="nome", min_length=1, max_length=255)
    knowledge_area: str = Field(alias="areaConhecimento", min_length=1, max_length=255)

class SubjectPatch(WireModel):
    name: Optional[str] = Field(None, alias="nome", min_length=1, max_length=255)
    knowledge_area: Optional[str] = Field(None, alias="areaConhecimento", min_length=1, max_length=255)

class SubjectOut(SubjectIn):
    id: str


# ---------- Classes ----------
class SchoolClassIn(WireModel):
    name: str = Field(alias="nome", min_length=1, max_length=255)

class SchoolClassPatch(WireModel):
    name: Optional[str] = Field(None, alias="nome", min_length=1, max_length=255)

class SchoolClassOut(SchoolClassIn):
    id: str


# ---------- Absences ----------
class AbsenceIn(WireModel):
    teacher_id: str = Field(alias="professorId", min_length=1)
    subject_id: str = Field(alias="disciplinaId", min_length=1)
    class_id: str = Field(alias="turmaId", min_length=1)
    weekday: int = Field(alias="diaSemana", ge=0, le=4)
    start_time: str = Field(alias="horarioInicio")
    duration: int = Field(alias="duracao", ge=1, le=8)
    week: int = Field(alias="semana", ge=1, le=53)
    year: int = Field(alias="ano", ge=2024)

    @field_validator("start_time")
    @classmethod
    def normalize_start_time(cls, v: str) -> str:
        if not _HHMM.match(v):
            raise ValueError("horarioInicio must be HH:MM")
        h, m = v.split(":")
        return f"{int(h):02d}:{m}"

class AbsenceOut(AbsenceIn):
    id: str


# ---------- Substitutions ----------
class SubstitutionOut(WireModel):
    id: str
    absence_id: str = Field(alias="ausenciaId")
    substitute_id: Optional[str] = Field(None, alias="professorSubstitutoId")
    status: SubstitutionStatus = SubstitutionStatus.PENDING
    message: Optional[str] = Field(None, alias="mensagem")


# ---------- Query params ----------
class WeekParams(WireModel):
    week: int = Field(alias="semana", ge=1, le=53)
    year: int = Field(alias="ano", ge=2024)
