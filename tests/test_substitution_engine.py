from __future__ import annotations
import pytest

from models import SubstitutionStatus
from storage import MemoryStorage
from storage.schemas import AbsenceIn, SchoolClassIn, SubjectIn, TeacherIn
from blueprints.schedule import services as svc

WEEK, YEAR = 10, 2025

def _teacher(storage, name, area, workload=0):
    t = storage.create_teacher(TeacherIn(name=name, knowledge_area=area))
    if workload:
        t = storage.update_workload(t.id, workload)
    return t

def _absence(storage, teacher, duration=2, week=WEEK, year=YEAR, weekday=0, start="08:00"):
    subj = storage.create_subject(SubjectIn(name="Matemática", knowledge_area=teacher.knowledge_area))
    cls = storage.create_class(SchoolClassIn(name="1A"))
    return storage.create_absence(AbsenceIn(
        teacher_id=teacher.id, subject_id=subj.id, class_id=cls.id,
        weekday=weekday, start_time=start, duration=duration, week=week, year=year,
    ))

@pytest.fixture()
def storage():
    return MemoryStorage()

def test_picks_least_loaded_teacher_of_same_area(storage):
    a = _teacher(storage, "A", "Math", 10)
    _teacher(storage, "B", "Math", 30)
    absent = _teacher(storage, "C", "Math", 0)
    absence = _absence(storage, absent, duration=2)

    res = svc.generate_schedule(storage, WEEK, YEAR)

    assert (res.generated, res.failed) == (1, 0)
    sub = storage.get_substitution_by_absence(absence.id)
    assert sub.status == SubstitutionStatus.ASSIGNED
    assert sub.substitute_id == a.id
    assert "A" in sub.message
    assert storage.get_teacher(a.id).workload == 12
    # the absent teacher is never its own substitute, even at workload 0
    assert storage.get_teacher(absent.id).workload == 0

def test_unavailable_when_every_candidate_would_exceed_cap(storage):
    b = _teacher(storage, "B", "Math", 59)
    absent = _teacher(storage, "C", "Math")
    absence = _absence(storage, absent, duration=2)

    res = svc.generate_schedule(storage, WEEK, YEAR)

    assert (res.generated, res.failed) == (0, 1)
    sub = storage.get_substitution_by_absence(absence.id)
    assert sub.status == SubstitutionStatus.UNAVAILABLE
    assert sub.substitute_id is None
    assert sub.message == svc.NO_SUBSTITUTE_MESSAGE
    assert storage.get_teacher(b.id).workload == 59
    assert storage.get_teacher(absent.id).workload == 0

def test_cap_is_inclusive(storage):
    b = _teacher(storage, "B", "Math", 58)
    absent = _teacher(storage, "C", "Math")
    _absence(storage, absent, duration=2)

    res = svc.generate_schedule(storage, WEEK, YEAR)

    assert res.generated == 1
    assert storage.get_teacher(b.id).workload == 60

def test_other_knowledge_areas_are_not_candidates(storage):
    _teacher(storage, "Free", "History", 0)
    absent = _teacher(storage, "C", "Math")
    absence = _absence(storage, absent)

    res = svc.generate_schedule(storage, WEEK, YEAR)

    assert res.failed == 1
    assert storage.get_substitution_by_absence(absence.id).status == SubstitutionStatus.UNAVAILABLE

def test_rerun_is_idempotent(storage):
    a = _teacher(storage, "A", "Math", 10)
    absent = _teacher(storage, "C", "Math")
    lonely = _teacher(storage, "L", "Art")
    ok_absence = _absence(storage, absent)
    failed_absence = _absence(storage, lonely)

    first = svc.generate_schedule(storage, WEEK, YEAR)
    assert (first.generated, first.failed) == (1, 1)
    before = {s.id: s for s in storage.list_substitutions()}

    second = svc.generate_schedule(storage, WEEK, YEAR)

    assert (second.generated, second.failed) == (0, 0)
    assert {s.id: s for s in storage.list_substitutions()} == before
    assert storage.get_teacher(a.id).workload == 12
    assert storage.get_substitution_by_absence(ok_absence.id).status == SubstitutionStatus.ASSIGNED
    assert storage.get_substitution_by_absence(failed_absence.id).status == SubstitutionStatus.UNAVAILABLE

def test_missing_absent_teacher_is_skipped_silently(storage):
    absent = _teacher(storage, "C", "Math")
    _teacher(storage, "A", "Math")
    absence = _absence(storage, absent)
    storage.delete_teacher(absent.id)

    res = svc.generate_schedule(storage, WEEK, YEAR)

    assert (res.generated, res.failed) == (0, 0)
    assert storage.get_substitution_by_absence(absence.id).status == SubstitutionStatus.PENDING

def test_workload_added_in_a_run_is_seen_by_later_absences(storage):
    a = _teacher(storage, "A", "Math", 0)
    b = _teacher(storage, "B", "Math", 5)
    absent = _teacher(storage, "C", "Math")
    first = _absence(storage, absent, duration=6, weekday=0)
    second = _absence(storage, absent, duration=6, weekday=1)

    res = svc.generate_schedule(storage, WEEK, YEAR)

    assert res.generated == 2
    assert {storage.get_substitution_by_absence(first.id).substitute_id,
            storage.get_substitution_by_absence(second.id).substitute_id} == {a.id, b.id}
    assert storage.get_teacher(a.id).workload == 6
    assert storage.get_teacher(b.id).workload == 11

def test_workload_never_exceeds_cap(storage):
    subs = [_teacher(storage, f"S{i}", "Math", w) for i, w in enumerate((40, 50, 55))]
    absent = _teacher(storage, "C", "Math")
    for day in range(5):
        for hour in ("07:00", "09:00", "13:00"):
            _absence(storage, absent, duration=8, weekday=day, start=hour)

    res = svc.generate_schedule(storage, WEEK, YEAR)

    assert res.generated + res.failed == 15
    assert res.failed > 0
    for t in storage.list_teachers():
        assert t.workload <= 60
    assert storage.get_teacher(subs[0].id).workload == 56

def test_ties_on_workload_break_by_name(storage):
    _teacher(storage, "Zeca", "Math", 4)
    ana = _teacher(storage, "Ana", "Math", 4)
    absent = _teacher(storage, "C", "Math")
    absence = _absence(storage, absent)

    svc.generate_schedule(storage, WEEK, YEAR)

    assert storage.get_substitution_by_absence(absence.id).substitute_id == ana.id

def test_only_requested_week_is_processed(storage):
    _teacher(storage, "A", "Math")
    absent = _teacher(storage, "C", "Math")
    this_week = _absence(storage, absent, week=WEEK)
    next_week = _absence(storage, absent, week=WEEK + 1)
    other_year = _absence(storage, absent, week=WEEK, year=YEAR + 1)

    res = svc.generate_schedule(storage, WEEK, YEAR)

    assert res.generated == 1
    assert storage.get_substitution_by_absence(this_week.id).status == SubstitutionStatus.ASSIGNED
    assert storage.get_substitution_by_absence(next_week.id).status == SubstitutionStatus.PENDING
    assert storage.get_substitution_by_absence(other_year.id).status == SubstitutionStatus.PENDING

@pytest.mark.parametrize("week,year", [(None, YEAR), (WEEK, None), (0, YEAR), (None, None)])
def test_missing_week_or_year_fails_before_any_write(storage, week, year):
    _teacher(storage, "A", "Math")
    absent = _teacher(storage, "C", "Math")
    absence = _absence(storage, absent)

    with pytest.raises(svc.MissingWeekError):
        svc.generate_schedule(storage, week, year)
    assert storage.get_substitution_by_absence(absence.id).status == SubstitutionStatus.PENDING

class _StaleSnapshotStorage(MemoryStorage):
    """Reads every substitution as pending, like a run that loaded before another one wrote."""

    def list_substitutions(self):
        return [s.model_copy(update={"status": SubstitutionStatus.PENDING, "substitute_id": None})
                for s in super().list_substitutions()]

def test_substitution_resolved_by_concurrent_run_is_not_double_counted():
    storage = _StaleSnapshotStorage()
    a = _teacher(storage, "A", "Math", 10)
    absent = _teacher(storage, "C", "Math")
    _absence(storage, absent, duration=2)
    svc.generate_schedule(storage, WEEK, YEAR)
    assert storage.get_teacher(a.id).workload == 12

    res = svc.generate_schedule(storage, WEEK, YEAR)

    assert (res.generated, res.failed) == (0, 0)
    assert storage.get_teacher(a.id).workload == 12

def test_pick_substitute_without_candidates():
    storage = MemoryStorage()
    absent = _teacher(storage, "C", "Math")
    assert svc.pick_substitute(absent, storage.list_teachers(), 2) is None
