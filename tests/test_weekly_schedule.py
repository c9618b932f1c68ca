from __future__ import annotations
import pytest

from storage import MemoryStorage
from storage.schemas import AbsenceIn, SchoolClassIn, SubjectIn, TeacherIn
from blueprints.schedule import services as svc

@pytest.fixture()
def seeded():
    st = MemoryStorage()
    ana = st.create_teacher(TeacherIn(name="Ana", knowledge_area="Math"))
    bia = st.create_teacher(TeacherIn(name="Bia", knowledge_area="Math"))
    math = st.create_subject(SubjectIn(name="Matemática", knowledge_area="Math"))
    cls = st.create_class(SchoolClassIn(name="2B"))

    def absence(teacher, weekday, start, week=20):
        return st.create_absence(AbsenceIn(
            teacher_id=teacher.id, subject_id=math.id, class_id=cls.id,
            weekday=weekday, start_time=start, duration=2, week=week, year=2025,
        ))

    later = absence(ana, 3, "10:00")
    earlier = absence(ana, 1, "14:00")
    first = absence(ana, 1, "07:00")
    absence(ana, 1, "07:00", week=21)
    return st, {"ana": ana, "bia": bia, "math": math, "cls": cls,
                "later": later, "earlier": earlier, "first": first}

def test_view_joins_entities_and_orders_by_day_and_time(seeded):
    st, e = seeded
    view = svc.weekly_schedule(st, 20, 2025)

    assert view["semana"] == 20 and view["ano"] == 2025
    assert [a["id"] for a in view["ausencias"]] == [e["first"].id, e["earlier"].id, e["later"].id]

    row = view["ausencias"][0]
    assert row["professorId"] == e["ana"].id
    assert row["diaSemana"] == 1 and row["horarioInicio"] == "07:00"
    assert row["professor"]["nome"] == "Ana"
    assert row["disciplina"]["areaConhecimento"] == "Math"
    assert row["turma"]["nome"] == "2B"
    assert row["substituicao"]["status"] == "pendente"
    assert row["substituicao"]["professorSubstituto"] is None

def test_view_after_generation_embeds_substitute(seeded):
    st, e = seeded
    svc.generate_schedule(st, 20, 2025)

    view = svc.weekly_schedule(st, 20, 2025)

    for row in view["ausencias"]:
        sub = row["substituicao"]
        assert sub["status"] == "atribuida"
        assert sub["professorSubstitutoId"] == e["bia"].id
        assert sub["professorSubstituto"]["nome"] == "Bia"
        assert sub["mensagem"] == "Professor Bia escalado automaticamente"
    # 3 absences x 2h
    assert view["ausencias"][0]["substituicao"]["professorSubstituto"]["cargaHoraria"] == 6

def test_dangling_references_render_as_null(seeded):
    st, e = seeded
    st.delete_subject(e["math"].id)
    st.delete_class(e["cls"].id)
    st.delete_teacher(e["ana"].id)

    row = svc.weekly_schedule(st, 20, 2025)["ausencias"][0]

    assert row["professor"] is None
    assert row["disciplina"] is None
    assert row["turma"] is None
    assert row["substituicao"] is not None

def test_empty_week(seeded):
    st, _ = seeded
    assert svc.weekly_schedule(st, 30, 2025) == {"semana": 30, "ano": 2025, "ausencias": []}

def test_week_required():
    with pytest.raises(svc.MissingWeekError):
        svc.weekly_schedule(MemoryStorage(), None, 2025)
