"""User session state behind a narrow mutation API.

Engine functions take plain snapshots. This service is the only place that
replaces the profile, vault and DSA progress. Every change goes through
``apply`` as a single commit, and subscribers then see the new snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable

from skillalign.catalog import load_demo_document, load_domains
from skillalign.dsa import DSAProgress
from skillalign.matching import slugify, sync_from_vault
from skillalign.models import SkillDomain, SkillItem, UserSkill, clamp_level
from skillalign.quiz import apply_quiz_level

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionState:
    selected_company: str | None = None
    selected_role: str | None = None
    user_skills: tuple[UserSkill, ...] = ()
    user_domains: tuple[SkillDomain, ...] = ()
    dsa_progress: DSAProgress = field(default_factory=DSAProgress)
    demo_mode: bool = False


Listener = Callable[[SessionState], None]


class SkillSession:
    def __init__(self, state: SessionState | None = None):
        if state is None:
            state = SessionState(user_domains=tuple(load_domains()))
        self._state = state
        self._listeners: list[Listener] = []

    def snapshot(self) -> SessionState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def apply(self, update: Callable[[SessionState], SessionState]) -> SessionState:
        new_state = update(self._state)
        if not isinstance(new_state, SessionState):
            raise TypeError("update must return a SessionState")
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)
        return new_state

    # selections

    def select_company(self, company_id: str | None) -> SessionState:
        return self.apply(lambda s: replace(s, selected_company=company_id))

    def select_role(self, role_id: str | None) -> SessionState:
        return self.apply(lambda s: replace(s, selected_role=role_id))

    # flat profile

    def set_user_skills(self, skills: list[UserSkill]) -> SessionState:
        return self.apply(lambda s: replace(s, user_skills=tuple(skills)))

    def update_skill(self, skill_id: str, level: int) -> SessionState:
        def update(s: SessionState) -> SessionState:
            if not any(skill.skill_id == skill_id for skill in s.user_skills):
                raise KeyError(f"Unknown profile skill {skill_id!r}")
            skills = tuple(
                UserSkill(k.skill_id, k.name, clamp_level(level), k.category) if k.skill_id == skill_id else k
                for k in s.user_skills
            )
            return replace(s, user_skills=skills)

        return self.apply(update)

    def add_skill(self, skill: UserSkill) -> SessionState:
        return self.apply(
            lambda s: replace(
                s, user_skills=tuple(k for k in s.user_skills if k.skill_id != skill.skill_id) + (skill,)
            )
        )

    def remove_skill(self, skill_id: str) -> SessionState:
        def update(s: SessionState) -> SessionState:
            kept = tuple(k for k in s.user_skills if k.skill_id != skill_id)
            if len(kept) == len(s.user_skills):
                raise KeyError(f"Unknown profile skill {skill_id!r}")
            return replace(s, user_skills=kept)

        return self.apply(update)

    def sync_vault(self) -> SessionState:
        return self.apply(lambda s: replace(s, user_skills=tuple(sync_from_vault(s.user_skills, s.user_domains))))

    # vault

    def record_quiz(self, domain_id: str, skill_id: str, level: int) -> SessionState:
        return self.apply(
            lambda s: replace(s, user_domains=tuple(apply_quiz_level(list(s.user_domains), domain_id, skill_id, level)))
        )

    def add_custom_skill(self, domain_id: str, name: str) -> SessionState:
        name = (name or "").strip()
        if not name:
            return self._state

        def update(s: SessionState) -> SessionState:
            domains = []
            for domain in s.user_domains:
                if domain.id == domain_id:
                    taken = {item.id for item in domain.skills}
                    base = f"custom-{slugify(name)}"
                    skill_id, n = base, 2
                    while skill_id in taken:
                        skill_id, n = f"{base}-{n}", n + 1
                    domain = replace(domain, skills=domain.skills + [SkillItem(id=skill_id, name=name, level=0)])
                domains.append(domain)
            if not any(d.id == domain_id for d in domains):
                raise KeyError(f"Unknown domain {domain_id!r}")
            return replace(s, user_domains=tuple(domains))

        return self.apply(update)

    def remove_vault_skill(self, domain_id: str, skill_id: str) -> SessionState:
        def update(s: SessionState) -> SessionState:
            return replace(
                s,
                user_domains=tuple(
                    replace(d, skills=[item for item in d.skills if item.id != skill_id]) if d.id == domain_id else d
                    for d in s.user_domains
                ),
            )

        return self.apply(update)

    # DSA progress

    def start_dsa_topic(self, topic_id: str) -> SessionState:
        return self.apply(lambda s: replace(s, dsa_progress=s.dsa_progress.start(topic_id)))

    def complete_dsa_topic(self, topic_id: str) -> SessionState:
        return self.apply(lambda s: replace(s, dsa_progress=s.dsa_progress.complete(topic_id)))

    # demo data

    def load_demo_data(self, document: dict | None = None) -> SessionState:
        demo = from_document(document or load_demo_document(), self._state.user_domains)
        logger.info("Loaded demo profile", extra={"role_id": demo.selected_role})
        return self.apply(lambda s: replace(demo, user_domains=s.user_domains, demo_mode=True))

    def toggle_demo_mode(self) -> SessionState:
        if not self._state.demo_mode:
            return self.load_demo_data()
        return self.apply(lambda s: SessionState(user_domains=s.user_domains))

    # persistence

    def to_document(self) -> dict:
        return to_document(self._state)

    @classmethod
    def from_document(cls, document: dict, default_domains: list[SkillDomain] | None = None) -> SkillSession:
        if default_domains is None:
            default_domains = load_domains()
        return cls(from_document(document, default_domains))


def _domain_document(domain: SkillDomain) -> dict:
    return {
        "id": domain.id,
        "name": domain.name,
        "description": domain.description,
        "subTracks": list(domain.sub_tracks),
        "skills": [{"id": item.id, "name": item.name, "level": item.level} for item in domain.skills],
    }


def to_document(state: SessionState) -> dict:
    return {
        "userSkills": [
            {"skillId": s.skill_id, "name": s.name, "level": s.level, "category": s.category}
            for s in state.user_skills
        ],
        "userDomains": [_domain_document(d) for d in state.user_domains],
        "dsaProgress": state.dsa_progress.to_snapshot(),
        "selectedCompany": state.selected_company,
        "selectedRole": state.selected_role,
    }


def _parse_skills(raw) -> tuple[UserSkill, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(
        UserSkill(
            skill_id=str(item["skillId"]),
            name=str(item.get("name") or item["skillId"]),
            level=item.get("level", 0),
            category=str(item.get("category") or "technical"),
        )
        for item in raw
        if isinstance(item, dict) and item.get("skillId")
    )


def _parse_domains(raw) -> tuple[SkillDomain, ...]:
    if not isinstance(raw, list):
        return ()
    domains = []
    for item in raw:
        if not isinstance(item, dict) or not item.get("id"):
            continue
        skills = item.get("skills") if isinstance(item.get("skills"), list) else []
        tracks = item.get("subTracks") if isinstance(item.get("subTracks"), list) else []
        domains.append(
            SkillDomain(
                id=str(item["id"]),
                name=str(item.get("name") or item["id"]),
                description=str(item.get("description") or ""),
                skills=[
                    SkillItem(id=str(s["id"]), name=str(s.get("name") or s["id"]), level=s.get("level", 0))
                    for s in skills
                    if isinstance(s, dict) and s.get("id")
                ],
                sub_tracks=[str(t) for t in tracks],
            )
        )
    return tuple(domains)


def _optional_id(value) -> str | None:
    return str(value) if isinstance(value, str) and value else None


def from_document(document, default_domains) -> SessionState:
    """Rebuild a session snapshot from a stored document.

    Missing or malformed sections fall back to defaults. The vault falls back
    to ``default_domains``.
    """
    if not isinstance(document, dict):
        document = {}
    domains = _parse_domains(document.get("userDomains")) or tuple(default_domains)
    return SessionState(
        selected_company=_optional_id(document.get("selectedCompany")),
        selected_role=_optional_id(document.get("selectedRole")),
        user_skills=_parse_skills(document.get("userSkills")),
        user_domains=domains,
        dsa_progress=DSAProgress.from_snapshot(document.get("dsaProgress")),
    )
