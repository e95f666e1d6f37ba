from __future__ import annotations

import json

import pytest

from skillalign.catalog import load_roles, role_lookup
from skillalign.radar import RadarAxis, project_radar
from skillalign.report import COMPARISON_COLUMNS, RADAR_COLUMNS, comparison_frame, export_payload, radar_frame
from skillalign.scoring import calculate_alignment, classify_requirements
from skillalign.session import SkillSession


def _demo():
    session = SkillSession()
    session.load_demo_data()
    state = session.snapshot()
    role = role_lookup(load_roles())[state.selected_role]
    statuses = classify_requirements(role.required_skills, state.user_skills, state.user_domains)
    score = calculate_alignment(state.user_skills, role.required_skills, state.user_domains)
    return state, role, statuses, score


def test_comparison_frame_has_one_row_per_requirement():
    _, role, statuses, _ = _demo()
    frame = comparison_frame(statuses)
    assert list(frame.columns) == COMPARISON_COLUMNS
    assert len(frame) == len(role.required_skills)
    git = frame[frame["Skill"] == "Git"].iloc[0]
    assert git["Gap"] == 0
    assert git["Status"] == "Met"
    assert git["Progress %"] == 100.0


def test_empty_statuses_give_empty_frame():
    frame = comparison_frame([])
    assert frame.empty
    assert list(frame.columns) == COMPARISON_COLUMNS


def test_export_payload_is_json_ready():
    state, role, statuses, score = _demo()
    payload = export_payload(state, role, statuses, score)
    assert json.loads(json.dumps(payload)) == payload
    assessment = payload["assessment"]
    assert assessment["alignment_score"] == 44
    assert assessment["band"] == "moderate"
    assert assessment["counts"] == {"met": 1, "partial": 4, "gap": 1}
    python = next(s for s in assessment["skills"] if s["skill_id"] == "python")
    assert python["required_label"] == "Framework"
    assert payload["profile"]["selectedRole"] == "backend"


def test_radar_frame_holds_grid_spokes_polygon_and_labels():
    chart = project_radar([RadarAxis("Python", 2, 4), RadarAxis("SQL", 4, 4), RadarAxis("DSA", 0, 3)], 100.0)
    frame = radar_frame(chart)
    assert list(frame.columns) == RADAR_COLUMNS
    grid = frame[frame["kind"] == "grid"]
    assert grid["series"].nunique() == len(chart.grid_radii) + len(chart.spokes)
    skill = frame[frame["kind"] == "skill"]
    assert len(skill) == 4
    assert skill.iloc[0]["x"] == skill.iloc[-1]["x"]
    assert skill.iloc[0]["y"] == pytest.approx(-50.0)
    labels = frame[frame["kind"] == "label"]
    assert list(labels["text"]) == ["Python", "SQL", "DSA"]
    assert labels.iloc[0]["y"] == pytest.approx(25.0)


def test_radar_frame_for_empty_chart_is_empty():
    frame = radar_frame(project_radar([], 100.0))
    assert frame.empty
    assert list(frame.columns) == RADAR_COLUMNS
