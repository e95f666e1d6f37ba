from __future__ import annotations

import math
from dataclasses import dataclass, field

MIN_LEVEL = 0
MAX_LEVEL = 4

LEVEL_LABELS = ["None", "Beginner", "Intermediate", "Advanced", "Expert"]
REQUIREMENT_LABELS = ["None", "Basics", "Problem-solving", "Framework", "Real-world"]

GAP_STATUSES = ("met", "partial", "gap")


def clamp_level(value, low: int = MIN_LEVEL, high: int = MAX_LEVEL) -> int:
    """Coerce ``value`` to an int skill level saturated to ``[low, high]``.

    Accepts ints, floats and numeric strings. Anything unparsable becomes ``low``.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return low
    if math.isnan(number):
        return low
    return int(math.floor(max(low, min(high, number)) + 0.5))


def level_label(level: int) -> str:
    return LEVEL_LABELS[clamp_level(level)]


@dataclass
class SkillItem:
    id: str
    name: str
    level: int = 0

    def __post_init__(self):
        self.level = clamp_level(self.level)


@dataclass
class SkillDomain:
    id: str
    name: str
    description: str = ""
    skills: list[SkillItem] = field(default_factory=list)
    sub_tracks: list[str] = field(default_factory=list)

    def find(self, skill_id: str) -> SkillItem | None:
        return next((item for item in self.skills if item.id == skill_id), None)


@dataclass
class UserSkill:
    skill_id: str
    name: str
    level: int
    category: str = "technical"

    def __post_init__(self):
        self.level = clamp_level(self.level)


@dataclass
class SkillRequirement:
    skill_id: str
    name: str
    required_level: int
    category: str = "technical"

    def __post_init__(self):
        self.required_level = clamp_level(self.required_level, low=1)


@dataclass
class DSATopic:
    id: str
    name: str
    difficulty: str = "easy"
    required: bool = True


@dataclass
class Role:
    id: str
    name: str
    description: str = ""
    required_skills: list[SkillRequirement] = field(default_factory=list)
    dsa_topics: list[DSATopic] = field(default_factory=list)


@dataclass
class CompanyType:
    id: str
    name: str
    description: str = ""


@dataclass(frozen=True)
class QuizQuestion:
    id: str
    text: str
    options: tuple[str, ...]
    correct_option_index: int


@dataclass(frozen=True)
class SimulationAction:
    id: str
    skill_id: str
    level_increase: int
    impact: str = "medium"
    title: str = ""
    description: str = ""


@dataclass
class ProjectSuggestion:
    id: str
    name: str
    description: str
    skills_improved: list[str]
    difficulty: str = "Medium"
    time_estimate: str = ""


@dataclass(frozen=True)
class SkillStatus:
    skill_id: str
    name: str
    user_level: int
    required_level: int
    status: str
    progress_pct: float


@dataclass(frozen=True)
class SimulationResult:
    baseline_score: int
    projected_score: int
    delta: int
    skills: tuple[UserSkill, ...]


@dataclass(frozen=True)
class DomainStats:
    total: int
    learned: int
    average_level: float
