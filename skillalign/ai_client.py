from __future__ import annotations

import json
import logging

import requests

from skillalign.config import Settings, settings as default_settings
from skillalign.requirements import extract_json_object

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """Analyze the company "{company}" for the role of "{role}".
Return ONLY a JSON object of the form:
{{"data": {{
  "company_profile": {{"company_category": "", "engineering_culture": "", "industry": "", "organization_scale": ""}},
  "role_profile": {{"role_summary": "", "key_responsibilities": []}},
  "required_skills": {{
    "core_skills": [{{"name": "", "level": 1}}],
    "supporting_skills": [{{"name": "", "level": 1}}],
    "bonus_skills": [{{"name": "", "level": 1}}]
  }},
  "programming_languages": {{"primary_languages": [], "secondary_languages": []}},
  "tools_and_technologies": [{{"tool": "", "expected_level": ""}}],
  "preparation_guidance": {{"focus_areas": [], "common_mistakes": [], "what_distinguishes_strong_candidates": []}}
}}}}
Skill levels: 1 = Beginner, 2 = Basic, 3 = Proficient, 4 = Expert."""


class AIClientError(RuntimeError):
    pass


def build_prompt(company: str, role: str) -> str:
    return PROMPT_TEMPLATE.format(company=company, role=role)


def fetch_role_analysis(company: str, role: str, settings: Settings | None = None) -> dict:
    """Ask the chat endpoint for a structured role analysis.

    Tries each configured model in turn. Returns the decoded JSON object, or
    ``{}`` when no key is configured or every model fails. Rejected
    credentials raise ``AIClientError``.
    """
    settings = settings or default_settings
    if not settings.ai_api_key:
        return {}

    headers = {
        "Authorization": f"Bearer {settings.ai_api_key}",
        "Content-Type": "application/json",
    }
    prompt = build_prompt(company, role)
    for model in settings.ai_models:
        logger.info("Requesting role analysis", extra={"model": model})
        body = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": 0.2,
        }
        try:
            response = requests.post(settings.ai_base_url, headers=headers, json=body, timeout=settings.ai_timeout)
        except requests.RequestException as exc:
            logger.warning("Model %s request failed: %s", model, exc, extra={"model": model})
            continue

        if response.status_code in (401, 403):
            raise AIClientError("The AI API key was rejected.")
        if not response.ok:
            logger.warning("Model %s returned HTTP %s", model, response.status_code, extra={"model": model})
            continue

        try:
            content = response.json()["choices"][0]["message"]["content"]
            payload = json.loads(extract_json_object(content))
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            logger.warning("Model %s returned an unusable reply: %s", model, exc, extra={"model": model})
            continue
        if isinstance(payload, dict):
            return payload

    logger.warning("No model produced a role analysis for %s / %s", company, role)
    return {}
