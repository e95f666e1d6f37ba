"""What-if readiness simulation.

The projection is always rebuilt from the baseline and the set of active
action ids. There is no incremental path, so toggling actions in any order,
or off and on again, reproduces the same score.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable

from skillalign.models import (
    MAX_LEVEL,
    Role,
    SimulationAction,
    SimulationResult,
    SkillDomain,
    SkillRequirement,
    UserSkill,
)
from skillalign.scoring import calculate_alignment

logger = logging.getLogger(__name__)


def actions_for_role(actions: Iterable[SimulationAction], role: Role) -> list[SimulationAction]:
    required = {req.skill_id for req in role.required_skills}
    return [action for action in actions if action.skill_id in required]


def _boosts(actions: Iterable[SimulationAction], active_ids: Iterable[str]) -> dict[str, int]:
    active = frozenset(active_ids)
    boosts: dict[str, int] = defaultdict(int)
    for action in actions:
        if action.id in active:
            boosts[action.skill_id] += max(0, action.level_increase)
    return dict(boosts)


def simulate_skills(
    baseline: Iterable[UserSkill],
    actions: Iterable[SimulationAction],
    active_ids: Iterable[str],
) -> list[UserSkill]:
    boosts = _boosts(actions, active_ids)
    simulated = []
    seen = set()
    for skill in baseline:
        seen.add(skill.skill_id)
        boost = boosts.get(skill.skill_id, 0)
        level = min(skill.level + boost, MAX_LEVEL) if boost else skill.level
        simulated.append(UserSkill(skill.skill_id, skill.name, level, skill.category))
    for skill_id, boost in boosts.items():
        if skill_id not in seen:
            simulated.append(UserSkill(skill_id=skill_id, name=skill_id, level=min(boost, MAX_LEVEL)))
    return simulated


def simulate(
    baseline: Iterable[UserSkill],
    actions: Iterable[SimulationAction],
    active_ids: Iterable[str],
    requirements: list[SkillRequirement],
    domains: Iterable[SkillDomain] = (),
    policy: str | None = None,
) -> SimulationResult:
    baseline = list(baseline)
    domains = list(domains)
    skills = simulate_skills(baseline, actions, active_ids)
    baseline_score = calculate_alignment(baseline, requirements, domains, policy)
    projected = calculate_alignment(skills, requirements, domains, policy)
    logger.debug("Simulated %d -> %d", baseline_score, projected, extra={"score": projected})
    return SimulationResult(
        baseline_score=baseline_score,
        projected_score=projected,
        delta=projected - baseline_score,
        skills=tuple(skills),
    )
