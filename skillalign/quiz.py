from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from skillalign.models import MAX_LEVEL, MIN_LEVEL, QuizQuestion, SkillDomain, SkillItem, clamp_level

logger = logging.getLogger(__name__)

QUIZ_LENGTH = 5

# score -> level; saturates below 0 and above 5
SCORE_LEVELS = {0: 0, 1: 1, 2: 1, 3: 2, 4: 3, 5: 4}


class QuizError(RuntimeError):
    pass


def score_to_level(score: int) -> int:
    if score <= 0:
        return MIN_LEVEL
    if score >= QUIZ_LENGTH:
        return MAX_LEVEL
    return SCORE_LEVELS[int(score)]


def _question(raw: dict, skill_label: str | None = None) -> QuizQuestion:
    text = raw["text"]
    if skill_label is not None:
        text = text.replace("{skill}", skill_label)
    return QuizQuestion(
        id=raw["id"],
        text=text,
        options=tuple(raw["options"]),
        correct_option_index=int(raw["correct_answer"]),
    )


def questions_for_skill(skill_id: str, banks: dict) -> list[QuizQuestion]:
    """Skill-specific bank when one exists, otherwise the generic template."""
    specific = banks.get("banks", {}).get(skill_id)
    if specific:
        return [_question(raw) for raw in specific]
    label = skill_id.replace("-", " ")
    return [_question(raw, label) for raw in banks.get("generic", [])]


@dataclass(frozen=True)
class QuizSession:
    """Linear quiz state: one answer per question, in order.

    ``answer`` and ``skip`` return new sessions. A skipped quiz is complete
    and counts every unanswered question as incorrect.
    """

    questions: tuple[QuizQuestion, ...]
    answers: tuple[int, ...] = ()
    skipped: bool = False

    @classmethod
    def start(cls, questions) -> QuizSession:
        return cls(questions=tuple(questions))

    @property
    def complete(self) -> bool:
        return self.skipped or len(self.answers) >= len(self.questions)

    @property
    def current_index(self) -> int:
        return min(len(self.answers), len(self.questions))

    @property
    def current_question(self) -> QuizQuestion | None:
        return None if self.complete else self.questions[self.current_index]

    def answer(self, option_index: int) -> QuizSession:
        if self.complete:
            raise QuizError("Quiz is already complete")
        return replace(self, answers=self.answers + (int(option_index),))

    def skip(self) -> QuizSession:
        return replace(self, skipped=True)

    @property
    def score(self) -> int:
        return sum(
            1
            for question, answer in zip(self.questions, self.answers)
            if answer == question.correct_option_index
        )

    @property
    def level(self) -> int:
        return score_to_level(self.score)


def apply_quiz_level(domains: list[SkillDomain], domain_id: str, skill_id: str, level: int) -> list[SkillDomain]:
    """Return a new vault with one skill's level replaced.

    Only the vault changes; the flat profile picks the level up on the next
    reconciliation or sync.
    """
    updated = []
    found = False
    for domain in domains:
        if domain.id != domain_id:
            updated.append(domain)
            continue
        if domain.find(skill_id) is None:
            raise KeyError(f"Skill {skill_id!r} not in domain {domain_id!r}")
        found = True
        skills = [
            SkillItem(id=item.id, name=item.name, level=clamp_level(level) if item.id == skill_id else item.level)
            for item in domain.skills
        ]
        updated.append(replace(domain, skills=skills))
    if not found:
        raise KeyError(f"Unknown domain {domain_id!r}")
    logger.info("Quiz set %s/%s to level %d", domain_id, skill_id, clamp_level(level), extra={"skill_id": skill_id})
    return updated
