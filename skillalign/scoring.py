from __future__ import annotations

import logging
from typing import Iterable

import numpy as np

from skillalign.matching import resolve_level
from skillalign.models import (
    GAP_STATUSES,
    DomainStats,
    Role,
    SkillDomain,
    SkillRequirement,
    SkillStatus,
    UserSkill,
    clamp_level,
)

logger = logging.getLogger(__name__)

BAND_THRESHOLDS = (
    (70, "strong"),
    (40, "moderate"),
)


def alignment_band(score: float) -> str:
    for threshold, band in BAND_THRESHOLDS:
        if score >= threshold:
            return band
    return "low"


def resolved_levels(
    requirements: list[SkillRequirement],
    user_skills: Iterable[UserSkill],
    domains: Iterable[SkillDomain] = (),
    policy: str | None = None,
) -> list[int]:
    user_skills = list(user_skills)
    domains = list(domains)
    return [resolve_level(req.skill_id, req.name, user_skills, domains, policy) for req in requirements]


def derive_profile(
    requirements: list[SkillRequirement],
    user_skills: Iterable[UserSkill],
    domains: Iterable[SkillDomain] = (),
    policy: str | None = None,
) -> list[UserSkill]:
    """Role-scoped profile: one entry per requirement at its resolved level."""
    levels = resolved_levels(requirements, user_skills, domains, policy)
    return [
        UserSkill(skill_id=req.skill_id, name=req.name, level=level, category=req.category)
        for req, level in zip(requirements, levels)
    ]


def calculate_alignment(
    user_skills: Iterable[UserSkill],
    requirements: list[SkillRequirement],
    domains: Iterable[SkillDomain] = (),
    policy: str | None = None,
) -> int:
    """Mean of per-skill ``min(user / required, 1)`` ratios as a 0-100 integer.

    Over-qualification never earns more than full credit for a skill. The
    percentage rounds half-up exactly, so 57.5 scores 58. An empty
    requirement set scores 0.
    """
    if not requirements:
        return 0
    user = np.array(resolved_levels(requirements, user_skills, domains, policy), dtype=np.int64)
    required = np.array([req.required_level for req in requirements], dtype=np.int64)
    # ratios scaled to a common denominator keep the sum exact
    scale = int(np.lcm.reduce(required))
    credit = int((np.minimum(user, required) * (scale // required)).sum())
    total = scale * len(requirements)
    return (200 * credit + total) // (2 * total)


def classify_skill(user_level: int, required_level: int) -> str:
    user_level = clamp_level(user_level)
    if user_level >= required_level:
        return "met"
    if user_level > 0:
        return "partial"
    return "gap"


def classify_requirements(
    requirements: list[SkillRequirement],
    user_skills: Iterable[UserSkill],
    domains: Iterable[SkillDomain] = (),
    policy: str | None = None,
) -> list[SkillStatus]:
    levels = resolved_levels(requirements, user_skills, domains, policy)
    statuses = []
    for req, level in zip(requirements, levels):
        statuses.append(
            SkillStatus(
                skill_id=req.skill_id,
                name=req.name,
                user_level=level,
                required_level=req.required_level,
                status=classify_skill(level, req.required_level),
                progress_pct=min(level / req.required_level * 100.0, 100.0),
            )
        )
    return statuses


def gap_counts(statuses: Iterable[SkillStatus]) -> dict[str, int]:
    counts = {status: 0 for status in GAP_STATUSES}
    for status in statuses:
        counts[status.status] += 1
    return counts


def prioritized_gaps(statuses: Iterable[SkillStatus]) -> list[SkillStatus]:
    """Unmet skills, largest shortfall first."""
    unmet = [s for s in statuses if s.status != "met"]
    return sorted(unmet, key=lambda s: s.required_level - s.user_level, reverse=True)


def rank_roles(
    user_skills: Iterable[UserSkill],
    roles: list[Role],
    domains: Iterable[SkillDomain] = (),
    policy: str | None = None,
) -> list[tuple[str, int]]:
    user_skills = list(user_skills)
    domains = list(domains)
    results = [
        (role.id, calculate_alignment(user_skills, role.required_skills, domains, policy))
        for role in roles
    ]
    results.sort(key=lambda r: r[1], reverse=True)
    return results


def domain_stats(domain: SkillDomain) -> DomainStats:
    return _stats([item.level for item in domain.skills])


def vault_stats(domains: Iterable[SkillDomain]) -> DomainStats:
    return _stats([item.level for domain in domains for item in domain.skills])


def _stats(levels: list[int]) -> DomainStats:
    if not levels:
        return DomainStats(total=0, learned=0, average_level=0.0)
    return DomainStats(
        total=len(levels),
        learned=sum(1 for level in levels if level > 0),
        average_level=float(np.mean(levels)),
    )
