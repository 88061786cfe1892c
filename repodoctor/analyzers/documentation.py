from __future__ import annotations

from pathlib import Path

from repodoctor.analyzers.base import Analyzer
from repodoctor.models import Issue, Project

MIN_README_LINES = 5
MIN_LICENSE_CHARS = 50
README_SECTIONS = [
    ("DOC-002", "install", "Installation"),
    ("DOC-006", "usage", "Usage"),
]


class DocumentationAnalyzer(Analyzer):
    name = "documentation"
    description = "Checks documentation quality and completeness"
    category = "Documentation"

    def analyze(self, project: Project) -> list[Issue]:
        root = project.root
        issues: list[Issue] = []

        readme = _read_optional(root / "README.md")
        if readme is not None:
            if len(readme.splitlines()) < MIN_README_LINES:
                issues.append(
                    self._issue(
                        "DOC-001",
                        "medium",
                        "README.md is too short",
                        "A good README should have at least a description, installation instructions, and usage examples.",
                        file_path="README.md",
                        suggestion="Add sections: Description, Installation, Usage",
                    )
                )
            else:
                lowered = readme.lower()
                for rule_id, keyword, section in README_SECTIONS:
                    if keyword in lowered:
                        continue
                    issues.append(
                        self._issue(
                            rule_id,
                            "low",
                            f"README.md missing {section} section",
                            f"Consider adding a {section} section to help users get started.",
                            file_path="README.md",
                            suggestion=f"Add a ## {section} section",
                        )
                    )

        if not (root / "CONTRIBUTING.md").exists():
            issues.append(
                self._issue(
                    "DOC-003",
                    "info",
                    "Missing CONTRIBUTING.md",
                    "A CONTRIBUTING.md helps new contributors understand how to participate.",
                    suggestion="Create a CONTRIBUTING.md with guidelines for contributors",
                )
            )

        for license_name in ("LICENSE", "LICENSE.md"):
            if not (root / license_name).exists():
                continue
            content = _read_optional(root / license_name)
            if content is not None and len(content.strip()) < MIN_LICENSE_CHARS:
                issues.append(
                    self._issue(
                        "DOC-004",
                        "medium",
                        "LICENSE file appears incomplete",
                        "The LICENSE file exists but has very little content.",
                        file_path=license_name,
                        suggestion="Add a proper license text (MIT, Apache 2.0, etc.)",
                        references=("https://choosealicense.com",),
                    )
                )
            break

        if not (root / "CODE_OF_CONDUCT.md").exists():
            issues.append(
                self._issue(
                    "DOC-005",
                    "info",
                    "Missing CODE_OF_CONDUCT.md",
                    "A code of conduct sets expectations for community behavior.",
                    suggestion="Add a CODE_OF_CONDUCT.md (e.g., Contributor Covenant)",
                    references=("https://www.contributor-covenant.org",),
                )
            )

        return issues


def _read_optional(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
