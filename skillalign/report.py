from __future__ import annotations

import pandas as pd

from skillalign.models import REQUIREMENT_LABELS, Role, SkillStatus
from skillalign.radar import RadarChart
from skillalign.scoring import alignment_band, gap_counts
from skillalign.session import SessionState, to_document

COMPARISON_COLUMNS = ["Skill", "Current", "Required", "Gap", "Status", "Progress %"]
RADAR_COLUMNS = ["x", "y", "order", "series", "kind", "text"]


def comparison_frame(statuses: list[SkillStatus]) -> pd.DataFrame:
    rows = [
        {
            "Skill": s.name,
            "Current": s.user_level,
            "Required": s.required_level,
            "Gap": max(0, s.required_level - s.user_level),
            "Status": s.status.title(),
            "Progress %": round(s.progress_pct, 1),
        }
        for s in statuses
    ]
    return pd.DataFrame(rows, columns=COMPARISON_COLUMNS)


def export_payload(state: SessionState, role: Role | None, statuses: list[SkillStatus], score: int) -> dict:
    return {
        "profile": to_document(state),
        "assessment": {
            "role": role.name if role else None,
            "alignment_score": score,
            "band": alignment_band(score),
            "counts": gap_counts(statuses),
            "skills": [
                {
                    "skill_id": s.skill_id,
                    "name": s.name,
                    "user_level": s.user_level,
                    "required_level": s.required_level,
                    "required_label": REQUIREMENT_LABELS[s.required_level],
                    "status": s.status,
                    "progress_pct": round(s.progress_pct, 1),
                }
                for s in statuses
            ],
        },
    }


def radar_frame(chart: RadarChart) -> pd.DataFrame:
    """Plot rows for a radar chart, with y flipped for an upward axis.

    ``kind`` is ``grid`` (rings and spokes), ``skill`` (the closed polygon)
    or ``label``; ``series`` separates the individual lines.
    """
    cx, cy = chart.center
    rows = []

    def add(kind: str, series: str, points) -> None:
        rows.extend(
            {"x": x, "y": -y, "order": i, "series": series, "kind": kind, "text": ""}
            for i, (x, y) in enumerate(points)
        )

    for g in chart.grid_radii:
        ring = [(cx + (sx - cx) * g / chart.radius, cy + (sy - cy) * g / chart.radius) for sx, sy in chart.spokes]
        add("grid", f"grid-{g:g}", ring + ring[:1])
    for i, spoke in enumerate(chart.spokes):
        add("grid", f"spoke-{i}", [chart.center, spoke])
    if chart.points:
        add("skill", "skill", chart.points + chart.points[:1])
    rows.extend(
        {"x": x, "y": -y, "order": 0, "series": "label", "kind": "label", "text": label}
        for label, x, y in chart.labels
    )
    return pd.DataFrame(rows, columns=RADAR_COLUMNS)
