from __future__ import annotations

from pathlib import Path

from repodoctor.fs import relative_path
from repodoctor.models import Category, Issue, Project, Severity


class Analyzer:
    """Base class for analyzers.

    ``applies_to`` must be a pure predicate over ``project.detected``.
    ``analyze`` may only read the project tree. Unparsable inputs are skipped
    inside the analyzer; errors reading the project root propagate.
    """

    name: str = "base"
    description: str = ""
    category: Category = "Structure"

    def applies_to(self, project: Project) -> bool:
        return True

    def analyze(self, project: Project) -> list[Issue]:
        raise NotImplementedError

    def _issue(
        self,
        rule_id: str,
        severity: Severity,
        title: str,
        description: str,
        file_path: str | None = None,
        line: int | None = None,
        suggestion: str | None = None,
        auto_fixable: bool = False,
        references: tuple[str, ...] = (),
        fix_hint: tuple[str, ...] = (),
    ) -> Issue:
        return Issue(
            rule_id=rule_id,
            analyzer=self.name,
            category=self.category,
            severity=severity,
            title=title,
            description=description,
            file_path=file_path,
            line=line,
            suggestion=suggestion,
            auto_fixable=auto_fixable,
            references=references,
            fix_hint=fix_hint,
        )


def env_is_gitignored(root: Path) -> bool:
    try:
        source = (root / ".gitignore").read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False
    return any(line.strip() in {".env", "/.env", ".env*"} for line in source.splitlines())


def project_file(project: Project, path: Path) -> str:
    return relative_path(path, project.root)
