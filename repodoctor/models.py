from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

Severity = Literal["info", "low", "medium", "high", "critical"]
Category = Literal["Structure", "Dependencies", "Configuration", "Testing", "Security", "Documentation"]
Grade = Literal["A", "B", "C", "D", "F"]

# Comparison order and scoring cost are tuned independently.
SEVERITY_ORDER: dict[Severity, int] = {
    "info": 0,
    "low": 1,
    "medium": 2,
    "high": 3,
    "critical": 4,
}
SEVERITY_PENALTY: dict[Severity, int] = {
    "critical": 25,
    "high": 15,
    "medium": 8,
    "low": 3,
    "info": 0,
}
CATEGORIES: tuple[Category, ...] = (
    "Structure",
    "Dependencies",
    "Configuration",
    "Testing",
    "Security",
    "Documentation",
)
FRAMEWORK_LABELS: dict[str, str] = {
    "symfony": "Symfony",
    "laravel": "Laravel",
    "flutter": "Flutter",
    "nextjs": "Next.js",
    "rust_cargo": "Rust/Cargo",
    "nodejs": "Node.js",
    "python": "Python",
    "unknown": "Unknown",
}


def parse_severity(value: str) -> Severity:
    normalized = value.strip().lower()
    if normalized not in SEVERITY_ORDER:
        raise ValueError(f"Unknown severity: {value!r}")
    return normalized  # type: ignore[return-value]


@dataclass(frozen=True, slots=True)
class Issue:
    """One occurrence of a rule violation.

    ``rule_id`` identifies the rule, not the occurrence: the same id shows up
    once per offending file or line. ``fix_hint`` carries tokens a fixer needs
    (a directory name, .gitignore entries) so it never has to parse ``title``.
    """

    rule_id: str
    analyzer: str
    category: Category
    severity: Severity
    title: str
    description: str
    file_path: str | None = None
    line: int | None = None
    suggestion: str | None = None
    auto_fixable: bool = False
    references: tuple[str, ...] = ()
    fix_hint: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.severity not in SEVERITY_ORDER:
            raise ValueError(f"Issue {self.rule_id} has unknown severity {self.severity!r}")
        if self.category not in CATEGORIES:
            raise ValueError(f"Issue {self.rule_id} has unknown category {self.category!r}")


@dataclass(frozen=True, slots=True)
class DetectedProject:
    framework: str = "unknown"
    language: str = "unknown"
    version: str | None = None
    package_manager: str | None = None
    has_git: bool = False
    ci_provider: str | None = None

    @property
    def framework_label(self) -> str:
        return FRAMEWORK_LABELS.get(self.framework, self.framework)


@dataclass(frozen=True, slots=True)
class Project:
    root: Path
    detected: DetectedProject = field(default_factory=DetectedProject)


@dataclass(slots=True)
class CategoryScore:
    name: Category
    score: int
    issues_count: int
    critical_count: int


@dataclass(slots=True)
class HealthScore:
    total: int
    grade: Grade
    breakdown: list[CategoryScore]


@dataclass(slots=True)
class ScanResult:
    project: Project
    issues: list[Issue]
    score: HealthScore
    duration: float


@dataclass(frozen=True, slots=True)
class FixResult:
    status: Literal["applied", "skipped"]
    message: str

    @classmethod
    def applied(cls, description: str) -> FixResult:
        return cls("applied", description)

    @classmethod
    def skipped(cls, reason: str) -> FixResult:
        return cls("skipped", reason)


@dataclass(frozen=True, slots=True)
class FixOutcome:
    status: Literal["applied", "skipped", "dry_run", "error"]
    message: str

    @classmethod
    def applied(cls, description: str) -> FixOutcome:
        return cls("applied", description)

    @classmethod
    def skipped(cls, reason: str) -> FixOutcome:
        return cls("skipped", reason)

    @classmethod
    def dry_run(cls, description: str) -> FixOutcome:
        return cls("dry_run", description)

    @classmethod
    def error(cls, message: str) -> FixOutcome:
        return cls("error", message)
