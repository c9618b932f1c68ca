from __future__ import annotations

from models import SubstitutionStatus
from storage import MemoryStorage
from storage.schemas import AbsenceIn, TeacherIn
from blueprints.dashboard.services import absences_timeline, dashboard_stats, most_assigned_teachers

def _absence(st, week=5, year=2025, teacher_id="absent"):
    return st.create_absence(AbsenceIn(
        teacher_id=teacher_id, subject_id="s", class_id="c",
        weekday=0, start_time="08:00", duration=1, week=week, year=year,
    ))

def _assign(st, absence, teacher):
    sub = st.get_substitution_by_absence(absence.id)
    st.resolve_substitution(sub.id, SubstitutionStatus.ASSIGNED, substitute_id=teacher.id, message="ok")

def test_most_assigned_ranks_by_count():
    st = MemoryStorage()
    x = st.create_teacher(TeacherIn(name="Xavier", knowledge_area="Math"))
    y = st.create_teacher(TeacherIn(name="Yara", knowledge_area="Math"))
    for _ in range(2):
        _assign(st, _absence(st), y)
    for _ in range(3):
        _assign(st, _absence(st), x)

    top = most_assigned_teachers(st)

    assert top == [
        {"id": x.id, "nome": "Xavier", "total": 3},
        {"id": y.id, "nome": "Yara", "total": 2},
    ]

def test_most_assigned_is_limited_and_skips_deleted_teachers():
    st = MemoryStorage()
    teachers = [st.create_teacher(TeacherIn(name=f"T{i}", knowledge_area="Math")) for i in range(7)]
    for i, t in enumerate(teachers):
        for _ in range(i + 1):
            _assign(st, _absence(st), t)
    st.delete_teacher(teachers[-1].id)

    top = most_assigned_teachers(st, limit=5)

    assert [row["nome"] for row in top] == ["T5", "T4", "T3", "T2", "T1"]

def test_status_counts():
    st = MemoryStorage()
    t = st.create_teacher(TeacherIn(name="T", knowledge_area="Math"))
    _assign(st, _absence(st), t)
    failed = _absence(st)
    st.resolve_substitution(st.get_substitution_by_absence(failed.id).id,
                            SubstitutionStatus.UNAVAILABLE, message="none")
    _absence(st)
    _absence(st)

    stats = dashboard_stats(st)

    assert stats["totalSubstituicoes"] == 4
    assert stats["substituicoesAtribuidas"] == 1
    assert stats["semDisponibilidade"] == 1
    assert stats["pendentes"] == 2

def test_timeline_orders_by_week_number_and_keeps_last_points():
    st = MemoryStorage()
    for week in (12, 3, 45, 7, 9, 10, 11, 2, 30, 12):
        _absence(st, week=week)
    _absence(st, week=1, year=2026)

    series = absences_timeline(st, points=8)

    assert len(series) == 8
    assert [p["semana"] for p in series] == [
        "Sem 7", "Sem 9", "Sem 10", "Sem 11", "Sem 12", "Sem 30", "Sem 45", "Sem 1",
    ]
    assert series[4] == {"semana": "Sem 12", "ano": 2025, "total": 2}
    assert series[-1]["ano"] == 2026

def test_empty_store():
    stats = dashboard_stats(MemoryStorage())
    assert stats["totalSubstituicoes"] == 0
    assert stats["professoresMaisEscalados"] == []
    assert stats["substituicoesTimeline"] == []
