from __future__ import annotations

from skillalign.catalog import load_roles, load_simulation_actions, role_lookup
from skillalign.models import UserSkill
from skillalign.simulator import actions_for_role, simulate, simulate_skills


def _backend():
    return role_lookup(load_roles())["backend"]


def _baseline() -> list[UserSkill]:
    return [
        UserSkill("python", "Python", 2),
        UserSkill("sql", "SQL/Databases", 1),
        UserSkill("apis", "REST APIs", 1),
        UserSkill("dsa", "DSA", 1, "dsa"),
        UserSkill("git", "Git", 3, "tools"),
    ]


def test_actions_for_role_keep_only_required_skills():
    ids = [a.id for a in actions_for_role(load_simulation_actions(), _backend())]
    assert "react-project" not in ids
    assert ids == ["dsa-problems", "api-project", "sql-practice", "github-activity", "python-advanced"]


def test_no_active_actions_returns_baseline():
    role = _backend()
    result = simulate(_baseline(), load_simulation_actions(), set(), role.required_skills)
    assert result.baseline_score == 44
    assert result.projected_score == 44
    assert result.delta == 0


def test_dsa_and_api_actions_project_67():
    role = _backend()
    result = simulate(_baseline(), load_simulation_actions(), {"dsa-problems", "api-project"}, role.required_skills)
    assert result.projected_score == 67
    assert result.delta == 23


def test_projection_ignores_toggle_order():
    role = _backend()
    actions = load_simulation_actions()
    a = simulate(_baseline(), actions, ["api-project", "dsa-problems"], role.required_skills)
    b = simulate(_baseline(), actions, ["dsa-problems", "api-project", "dsa-problems"], role.required_skills)
    assert a == b


def test_toggling_off_restores_baseline():
    role = _backend()
    actions = load_simulation_actions()
    active = {"sql-practice"}
    on = simulate(_baseline(), actions, active, role.required_skills)
    active.discard("sql-practice")
    off = simulate(_baseline(), actions, active, role.required_skills)
    assert on.projected_score > on.baseline_score
    assert off.projected_score == off.baseline_score


def test_missing_skill_is_synthesized():
    skills = simulate_skills([UserSkill("python", "Python", 2)], load_simulation_actions(), {"api-project"})
    apis = next(s for s in skills if s.skill_id == "apis")
    assert apis.name == "apis"
    assert apis.level == 2


def test_boost_is_clamped_and_baseline_untouched():
    baseline = [UserSkill("dsa", "DSA", 3, "dsa")]
    skills = simulate_skills(baseline, load_simulation_actions(), {"dsa-problems"})
    assert skills[0].level == 4
    assert skills[0].category == "dsa"
    assert baseline[0].level == 3
