from __future__ import annotations

from collections.abc import Iterable
import math

from repodoctor.models import CATEGORIES, SEVERITY_PENALTY, Category, CategoryScore, Grade, HealthScore, Issue


CATEGORY_WEIGHTS: dict[Category, float] = {
    "Structure": 0.20,
    "Dependencies": 0.20,
    "Configuration": 0.15,
    "Testing": 0.25,
    "Security": 0.15,
    "Documentation": 0.05,
}
GRADE_BANDS: list[tuple[int, Grade]] = [
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
]


def calculate_health_score(issues: Iterable[Issue]) -> HealthScore:
    """Score an issue set from 0 to 100.

    Every category starts at 100 and loses the penalty of each of its issues,
    clamped to [0, 100]. The total is the weighted mean of the six category
    scores, rounded half up, so identical input always yields identical output.
    """
    by_category: dict[Category, list[Issue]] = {category: [] for category in CATEGORIES}
    for issue in issues:
        by_category[issue.category].append(issue)

    breakdown: list[CategoryScore] = []
    weighted_total = 0.0
    total_weight = 0.0
    for category in CATEGORIES:
        category_issues = by_category[category]
        raw = 100 - sum(SEVERITY_PENALTY[issue.severity] for issue in category_issues)
        score = max(0, min(100, raw))
        breakdown.append(
            CategoryScore(
                name=category,
                score=score,
                issues_count=len(category_issues),
                critical_count=sum(1 for issue in category_issues if issue.severity == "critical"),
            )
        )
        weight = CATEGORY_WEIGHTS[category]
        weighted_total += score * weight
        total_weight += weight

    total = _round_half_up(weighted_total / total_weight) if total_weight > 0 else 100
    total = max(0, min(100, total))
    return HealthScore(total=total, grade=grade_for(total), breakdown=breakdown)


def grade_for(total: int) -> Grade:
    for lower_bound, grade in GRADE_BANDS:
        if total >= lower_bound:
            return grade
    return "F"


def _round_half_up(value: float) -> int:
    # round() is banker's rounding; scores must round .5 upwards.
    return int(math.floor(value + 0.5))
