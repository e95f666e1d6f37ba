"""Schema for AI-structured company/role analyses.

Payloads come back from a language model, so every field is optional and
loosely typed on the wire. Validation happens once here: bad sections become
empty, levels are coerced into 1-4 (default 1), and skill entries without a
name are dropped. Downstream code only sees ``SkillRequirement`` objects.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, model_validator

from skillalign.matching import slugify
from skillalign.models import SkillRequirement, clamp_level

logger = logging.getLogger(__name__)

TIERS = ("core", "supporting", "bonus")

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _texts(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [t for t in (_text(v) for v in value) if t]


def _mapping(value: Any):
    return value if isinstance(value, (dict, BaseModel)) else {}


def _records(value: Any) -> list:
    if not isinstance(value, list):
        return []
    return [{"name": v} if isinstance(v, str) else v for v in value if isinstance(v, (dict, str, BaseModel))]


def _level(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 1
    try:
        float(value)
    except (TypeError, ValueError):
        return 1
    return clamp_level(value, low=1)


Text = Annotated[str, BeforeValidator(_text)]
TextList = Annotated[list[str], BeforeValidator(_texts)]


class _Lenient(BaseModel):
    model_config = ConfigDict(extra="ignore")


class RequiredSkillEntry(_Lenient):
    name: Text = ""
    level: Annotated[int, BeforeValidator(_level)] = 1


Entries = Annotated[list[RequiredSkillEntry], BeforeValidator(_records)]


class RequiredSkills(_Lenient):
    core_skills: Entries = Field(default_factory=list)
    supporting_skills: Entries = Field(default_factory=list)
    bonus_skills: Entries = Field(default_factory=list)

    @model_validator(mode="after")
    def _drop_nameless(self) -> RequiredSkills:
        for tier in TIERS:
            entries = getattr(self, f"{tier}_skills")
            kept = [e for e in entries if e.name]
            if len(kept) != len(entries):
                logger.warning("Dropped %d unnamed %s skill entries", len(entries) - len(kept), tier)
                setattr(self, f"{tier}_skills", kept)
        return self


class CompanyProfile(_Lenient):
    company_category: Text = ""
    engineering_culture: Text = ""
    industry: Text = ""
    organization_scale: Text = ""


class RoleProfile(_Lenient):
    role_summary: Text = ""
    key_responsibilities: TextList = Field(default_factory=list)


class ProgrammingLanguages(_Lenient):
    primary_languages: TextList = Field(default_factory=list)
    secondary_languages: TextList = Field(default_factory=list)


class ToolExpectation(_Lenient):
    tool: Text = ""
    expected_level: Text = ""


class PreparationGuidance(_Lenient):
    focus_areas: TextList = Field(default_factory=list)
    common_mistakes: TextList = Field(default_factory=list)
    what_distinguishes_strong_candidates: TextList = Field(default_factory=list)


def _tools(value: Any) -> list:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, BaseModel) or (isinstance(v, dict) and _text(v.get("tool")))]


class RoleAnalysis(_Lenient):
    company_profile: Annotated[CompanyProfile, BeforeValidator(_mapping)] = Field(default_factory=CompanyProfile)
    role_profile: Annotated[RoleProfile, BeforeValidator(_mapping)] = Field(default_factory=RoleProfile)
    required_skills: Annotated[RequiredSkills, BeforeValidator(_mapping)] = Field(default_factory=RequiredSkills)
    programming_languages: Annotated[ProgrammingLanguages, BeforeValidator(_mapping)] = Field(
        default_factory=ProgrammingLanguages
    )
    tools_and_technologies: Annotated[list[ToolExpectation], BeforeValidator(_tools)] = Field(default_factory=list)
    preparation_guidance: Annotated[PreparationGuidance, BeforeValidator(_mapping)] = Field(
        default_factory=PreparationGuidance
    )


def extract_json_object(text: str) -> str:
    """Outermost ``{...}`` block of a model reply, or ``""``."""
    match = _JSON_OBJECT.search(text or "")
    return match.group(0) if match else ""


def parse_role_analysis(payload: Any) -> RoleAnalysis:
    if isinstance(payload, (str, bytes)):
        text = payload.decode("utf-8", errors="ignore") if isinstance(payload, bytes) else payload
        try:
            payload = json.loads(extract_json_object(text))
        except json.JSONDecodeError:
            logger.warning("Role analysis reply is not valid JSON")
            payload = {}
    if not isinstance(payload, dict):
        payload = {}
    if isinstance(payload.get("data"), dict):
        payload = payload["data"]
    try:
        return RoleAnalysis.model_validate(payload)
    except ValidationError as exc:
        logger.warning("Role analysis failed validation: %s", exc)
        return RoleAnalysis()


def requirements_from_analysis(analysis: RoleAnalysis) -> list[SkillRequirement]:
    requirements: list[SkillRequirement] = []
    seen: set[str] = set()
    for tier in TIERS:
        for entry in getattr(analysis.required_skills, f"{tier}_skills"):
            skill_id = slugify(entry.name)
            if not skill_id or skill_id in seen:
                continue
            seen.add(skill_id)
            requirements.append(
                SkillRequirement(skill_id=skill_id, name=entry.name, required_level=entry.level, category=tier)
            )
    return requirements
