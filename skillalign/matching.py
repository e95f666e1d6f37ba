"""Skill identity reconciliation between the flat profile and the skill vault.

A required skill is looked up by id first, then by canonical name, then by
name containment. The containment rule is a policy:

- ``word``: one canonical name must appear in the other on token
  boundaries ("git" matches "git github", "java" does not match "javascript").
- ``substring``: arbitrary substring containment, kept to reproduce the
  legacy behaviour. It admits false positives such as "Java" in "JavaScript".

Canonical names keep ``+`` and ``#`` as word characters so "C++", "C#" and "C"
stay distinct skills.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from skillalign.config import settings
from skillalign.models import SkillDomain, UserSkill

logger = logging.getLogger(__name__)

MATCH_POLICIES = ("word", "substring")

_NON_WORD = re.compile(r"[^a-z0-9+#]+")


def canonicalize(text: str | None) -> str:
    return _NON_WORD.sub(" ", (text or "").lower()).strip()


def slugify(text: str | None) -> str:
    return canonicalize(text).replace(" ", "-")


def _check_policy(policy: str | None) -> str:
    policy = (policy or settings.match_policy).strip().lower()
    if policy not in MATCH_POLICIES:
        raise ValueError(f"Unknown match policy {policy!r}; expected one of {MATCH_POLICIES}")
    return policy


def _contains(outer: str, inner: str, policy: str) -> bool:
    if policy == "word":
        return f" {inner} " in f" {outer} "
    return inner in outer


def names_match(a: str | None, b: str | None, policy: str | None = None) -> bool:
    policy = _check_policy(policy)
    ca, cb = canonicalize(a), canonicalize(b)
    if not ca or not cb:
        return False
    if ca == cb:
        return True
    return _contains(ca, cb, policy) or _contains(cb, ca, policy)


def _staged_match(
    skill_id: str | None,
    name: str | None,
    candidates: list[tuple[str, str, int]],
    policy: str,
) -> tuple[str, str, int] | None:
    wanted_id = (skill_id or "").strip().lower()
    wanted_name = canonicalize(name)

    if wanted_id:
        for candidate in candidates:
            if candidate[0].strip().lower() == wanted_id:
                return candidate
    if wanted_name:
        for candidate in candidates:
            if canonicalize(candidate[1]) == wanted_name:
                return candidate
        for candidate in candidates:
            if names_match(candidate[1], name, policy):
                return candidate
    return None


def resolve_level(
    skill_id: str | None,
    name: str | None,
    user_skills: Iterable[UserSkill],
    domains: Iterable[SkillDomain] = (),
    policy: str | None = None,
) -> int:
    """Best-known level for a skill across the flat profile and the vault.

    The flat profile wins when it holds a level above 0. Otherwise every
    vault domain is searched with the same stages and the highest level wins.
    Unknown skills resolve to 0.
    """
    policy = _check_policy(policy)
    flat = _staged_match(skill_id, name, [(s.skill_id, s.name, s.level) for s in user_skills], policy)
    if flat is not None and flat[2] > 0:
        logger.debug("Resolved %s from profile entry %s", skill_id or name, flat[0])
        return flat[2]

    best = flat[2] if flat is not None else 0
    for domain in domains:
        hit = _staged_match(skill_id, name, [(s.id, s.name, s.level) for s in domain.skills], policy)
        if hit is not None and hit[2] > best:
            logger.debug("Resolved %s from vault %s/%s", skill_id or name, domain.id, hit[0])
            best = hit[2]
    return best


def sync_from_vault(user_skills: Iterable[UserSkill], domains: Iterable[SkillDomain]) -> list[UserSkill]:
    """Merge assessed vault skills into the flat profile.

    Vault items above level 0 replace profile entries with the same id; new
    ids are appended. Inputs are left untouched.
    """
    merged = [UserSkill(s.skill_id, s.name, s.level, s.category) for s in user_skills]
    index = {skill.skill_id: i for i, skill in enumerate(merged)}
    for domain in domains:
        for item in domain.skills:
            if item.level <= 0:
                continue
            synced = UserSkill(skill_id=item.id, name=item.name, level=item.level, category="technical")
            if item.id in index:
                synced.category = merged[index[item.id]].category
                merged[index[item.id]] = synced
            else:
                index[item.id] = len(merged)
                merged.append(synced)
    return merged
