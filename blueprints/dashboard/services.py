# blueprints/dashboard/services.py
from __future__ import annotations
from collections import Counter
from typing import Any, Dict, List

from models import SubstitutionStatus
from storage import Storage

def status_counts(storage: Storage) -> Dict[str, int]:
    counts = Counter(s.status for s in storage.list_substitutions())
    return {
        "totalSubstituicoes": sum(counts.values()),
        "substituicoesAtribuidas": counts[SubstitutionStatus.ASSIGNED],
        "semDisponibilidade": counts[SubstitutionStatus.UNAVAILABLE],
        "pendentes": counts[SubstitutionStatus.PENDING],
    }

def most_assigned_teachers(storage: Storage, limit: int = 5) -> List[Dict[str, Any]]:
    """Substitutes ranked by number of assigned substitutions (deleted teachers dropped)."""
    teachers = {t.id: t for t in storage.list_teachers()}
    totals = Counter(
        s.substitute_id for s in storage.list_substitutions()
        if s.status == SubstitutionStatus.ASSIGNED and s.substitute_id in teachers
    )
    ranked = sorted(totals.items(), key=lambda kv: (-kv[1], teachers[kv[0]].name))
    return [{"id": tid, "nome": teachers[tid].name, "total": total} for tid, total in ranked[:limit]]

def absences_timeline(storage: Storage, points: int = 8) -> List[Dict[str, Any]]:
    """Absence counts per school week, oldest first, last ``points`` weeks only."""
    per_week = Counter((a.year, a.week) for a in storage.list_absences())
    series = [
        {"semana": f"Sem {week}", "ano": year, "total": total}
        for (year, week), total in sorted(per_week.items())
    ]
    return series[-points:] if points > 0 else []

def dashboard_stats(storage: Storage, top_n: int = 5, timeline_points: int = 8) -> Dict[str, Any]:
    return {
        **status_counts(storage),
        "professoresMaisEscalados": most_assigned_teachers(storage, top_n),
        "substituicoesTimeline": absences_timeline(storage, timeline_points),
    }
