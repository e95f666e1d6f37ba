from __future__ import annotations

import json
import logging
from pathlib import Path

from skillalign.config import settings
from skillalign.matching import canonicalize
from skillalign.models import (
    CompanyType,
    DSATopic,
    ProjectSuggestion,
    Role,
    SimulationAction,
    SkillDomain,
    SkillItem,
    SkillRequirement,
)

logger = logging.getLogger(__name__)

ROLE_KEYWORDS = {
    "backend": ("backend", "back end", "server", "api"),
    "frontend": ("frontend", "front end", "ui", "web"),
    "ml": ("ml", "machine learning", "data", "ai"),
}


def _read_json(name: str, data_dir: Path | None = None):
    path = (data_dir or settings.data_dir) / name
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_domains(data_dir: Path | None = None) -> list[SkillDomain]:
    """Return a fresh copy of the default skill vault, every level at 0."""
    raw = _read_json("skill_domains.json", data_dir)
    domains = [
        SkillDomain(
            id=item["id"],
            name=item["name"],
            description=item.get("description", ""),
            skills=[SkillItem(id=s["id"], name=s["name"], level=s.get("level", 0)) for s in item["skills"]],
            sub_tracks=list(item.get("sub_tracks", [])),
        )
        for item in raw["domains"]
    ]
    logger.info("Loaded %d skill domains (catalog v%s)", len(domains), raw.get("version", "?"))
    return domains


def load_roles(data_dir: Path | None = None) -> list[Role]:
    raw = _read_json("roles.json", data_dir)
    return [
        Role(
            id=item["id"],
            name=item["name"],
            description=item.get("description", ""),
            required_skills=[
                SkillRequirement(
                    skill_id=req["skill_id"],
                    name=req["name"],
                    required_level=req["required_level"],
                    category=req.get("category", "technical"),
                )
                for req in item["required_skills"]
            ],
            dsa_topics=[
                DSATopic(
                    id=topic["id"],
                    name=topic["name"],
                    difficulty=topic.get("difficulty", "easy"),
                    required=bool(topic.get("required", True)),
                )
                for topic in item.get("dsa_topics", [])
            ],
        )
        for item in raw
    ]


def role_lookup(roles: list[Role]) -> dict[str, Role]:
    return {role.id: role for role in roles}


def match_role(title: str, roles: list[Role]) -> Role | None:
    """Catalog role whose keywords appear in a free-text job title.

    Offline stand-in for AI role analysis. Keywords are matched on whole
    words; the first role in ``ROLE_KEYWORDS`` order wins.
    """
    words = f" {canonicalize(title)} "
    by_id = role_lookup(roles)
    for role_id, keywords in ROLE_KEYWORDS.items():
        if role_id in by_id and any(f" {keyword} " in words for keyword in keywords):
            return by_id[role_id]
    return None


def load_company_types(data_dir: Path | None = None) -> list[CompanyType]:
    return [CompanyType(**item) for item in _read_json("company_types.json", data_dir)]


def load_simulation_actions(data_dir: Path | None = None) -> list[SimulationAction]:
    return [
        SimulationAction(
            id=item["id"],
            skill_id=item["skill_id"],
            level_increase=int(item["level_increase"]),
            impact=item.get("impact", "medium"),
            title=item.get("title", ""),
            description=item.get("description", ""),
        )
        for item in _read_json("simulation_actions.json", data_dir)
    ]


def load_project_suggestions(data_dir: Path | None = None) -> list[ProjectSuggestion]:
    return [ProjectSuggestion(**item) for item in _read_json("project_suggestions.json", data_dir)]


def load_practice_platforms(data_dir: Path | None = None) -> list[dict[str, str]]:
    return _read_json("practice_platforms.json", data_dir)


def load_quiz_banks(data_dir: Path | None = None) -> dict:
    """Raw quiz banks: ``{"generic": [...], "banks": {skill_id: [...]}}``."""
    return _read_json("quiz_banks.json", data_dir)


def load_demo_document(data_dir: Path | None = None) -> dict:
    return _read_json("demo_profile.json", data_dir)
