"""Radar (spider) chart geometry.

Axis ``i`` of ``N`` sits at angle ``i * 2π/N - π/2`` so the first axis points
up in screen coordinates. Values are normalized against their own maximum and
clamped to ``[0, 1]``, so no point is ever drawn outside the outer ring.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

import numpy as np

from skillalign.matching import resolve_level
from skillalign.models import SkillDomain, SkillRequirement, UserSkill

GRID_RATIOS = (0.25, 0.5, 0.75, 1.0)
LABEL_RATIO = 1.25
LABEL_LENGTH = 10


@dataclass(frozen=True)
class RadarAxis:
    label: str
    value: float
    max_value: float


@dataclass
class RadarChart:
    center: tuple[float, float]
    radius: float
    points: list[tuple[float, float]] = field(default_factory=list)
    path: str = ""
    grid_radii: list[float] = field(default_factory=list)
    spokes: list[tuple[float, float]] = field(default_factory=list)
    labels: list[tuple[str, float, float]] = field(default_factory=list)


def _normalized(axes: list[RadarAxis]) -> np.ndarray:
    values = np.array([axis.value for axis in axes], dtype=float)
    maxima = np.array([axis.max_value for axis in axes], dtype=float)
    safe = np.where(maxima > 0, maxima, 1.0)
    ratios = np.where(maxima > 0, values / safe, 0.0)
    return np.clip(ratios, 0.0, 1.0)


def _polar(center: tuple[float, float], radii: np.ndarray, angles: np.ndarray) -> list[tuple[float, float]]:
    xs = center[0] + radii * np.cos(angles)
    ys = center[1] + radii * np.sin(angles)
    return [(float(x), float(y)) for x, y in zip(xs, ys)]


def svg_path(points: list[tuple[float, float]]) -> str:
    if not points:
        return ""
    segments = [f"{'M' if i == 0 else 'L'} {x} {y}" for i, (x, y) in enumerate(points)]
    return " ".join(segments) + " Z"


def project_radar(
    axes: Iterable[RadarAxis],
    radius: float,
    center: tuple[float, float] | None = None,
) -> RadarChart:
    axes = list(axes)
    center = center if center is not None else (radius, radius)
    chart = RadarChart(center=center, radius=radius, grid_radii=[radius * r for r in GRID_RATIOS])
    if not axes:
        return chart

    n = len(axes)
    angles = np.arange(n) * (2 * np.pi / n) - np.pi / 2
    full = np.full(n, float(radius))

    chart.points = _polar(center, radius * _normalized(axes), angles)
    chart.path = svg_path(chart.points)
    chart.spokes = _polar(center, full, angles)
    chart.labels = [
        (axis.label, x, y)
        for axis, (x, y) in zip(axes, _polar(center, full * LABEL_RATIO, angles))
    ]
    return chart


def radar_axes(
    requirements: list[SkillRequirement],
    user_skills: Iterable[UserSkill],
    domains: Iterable[SkillDomain] = (),
    policy: str | None = None,
) -> list[RadarAxis]:
    """One axis per requirement: resolved level against required level."""
    user_skills = list(user_skills)
    domains = list(domains)
    return [
        RadarAxis(
            label=req.name.split("/")[0][:LABEL_LENGTH],
            value=resolve_level(req.skill_id, req.name, user_skills, domains, policy),
            max_value=req.required_level,
        )
        for req in requirements
    ]
