from __future__ import annotations

from typing import Iterable
from urllib.parse import quote_plus

from skillalign.models import ProjectSuggestion, SkillDomain, SkillRequirement, UserSkill
from skillalign.scoring import classify_requirements, prioritized_gaps

MAX_PROJECTS = 3

IMPROVEMENT_TIPS = {
    "dsa": "Solve 50+ LeetCode problems focusing on core patterns",
    "python": "Build a REST API project, practice OOP concepts",
    "sql": "Complete SQL exercises, practice complex queries and joins",
    "apis": "Build a full CRUD API with authentication",
    "git": "Contribute to open source, practice branching strategies",
    "react": "Build 2-3 complete React apps with state management",
    "javascript": "Master ES6+, async/await, and DOM manipulation",
}
DEFAULT_TIP = "Practice with real-world projects and online resources"


def _priority(gap_size: int) -> str:
    return "high" if gap_size >= 2 else "medium"


def build_enhancement_plan(
    requirements: list[SkillRequirement],
    user_skills: Iterable[UserSkill],
    projects: list[ProjectSuggestion],
    domains: Iterable[SkillDomain] = (),
    policy: str | None = None,
) -> dict[str, list[dict]]:
    statuses = classify_requirements(requirements, user_skills, domains, policy)
    gaps = [
        {
            "skill_id": s.skill_id,
            "name": s.name,
            "current_level": s.user_level,
            "required_level": s.required_level,
            "gap_size": s.required_level - s.user_level,
            "priority": _priority(s.required_level - s.user_level),
            "tip": IMPROVEMENT_TIPS.get(s.skill_id, DEFAULT_TIP),
        }
        for s in prioritized_gaps(statuses)
    ]
    gap_ids = {gap["skill_id"] for gap in gaps}
    relevant = [
        {
            "id": project.id,
            "name": project.name,
            "description": project.description,
            "difficulty": project.difficulty,
            "time_estimate": project.time_estimate,
            "skills_improved": list(project.skills_improved),
            "gap_skills": [s for s in project.skills_improved if s in gap_ids],
        }
        for project in projects
        if any(s in gap_ids for s in project.skills_improved)
    ]
    return {"gaps": gaps, "projects": relevant[:MAX_PROJECTS]}


def build_practice_links(platforms: list[dict[str, str]]) -> list[dict[str, str]]:
    return [
        {"provider": item["name"], "title": f"Practice DSA on {item['name']}", "url": item["url"]}
        for item in platforms
        if item.get("name") and item.get("url")
    ]


def build_training_links(skills: list[str]) -> list[dict[str, str]]:
    top = skills[:3] if skills else ["data structures", "algorithms", "system design"]
    query = quote_plus(" ".join(top))
    return [
        {
            "provider": "Coursera",
            "title": "Role-aligned courses",
            "url": f"https://www.coursera.org/search?query={query}",
        },
        {
            "provider": "edX",
            "title": "Professional certificates",
            "url": f"https://www.edx.org/search?q={query}",
        },
        {
            "provider": "Udemy",
            "title": "Hands-on project tracks",
            "url": f"https://www.udemy.com/courses/search/?q={query}",
        },
    ]
