from __future__ import annotations

from repodoctor.analyzers.base import Analyzer
from repodoctor.fs import max_directory_depth, path_exists
from repodoctor.models import Issue, Project

REQUIRED_DIRS: dict[str, list[str]] = {
    "symfony": ["src", "config", "templates"],
    "laravel": ["app", "config", "resources", "routes"],
    "flutter": ["lib", "test"],
    "nextjs": ["pages", "public"],
    "rust_cargo": ["src"],
    "nodejs": ["src"],
    "python": ["src"],
}
FORBIDDEN_PATHS = ["node_modules", ".env", "dist/credentials"]
MAX_DIRECTORY_DEPTH = 8


class StructureAnalyzer(Analyzer):
    name = "structure"
    description = "Analyzes project directory structure and essential files"
    category = "Structure"

    def analyze(self, project: Project) -> list[Issue]:
        root = project.root
        label = project.detected.framework_label
        issues: list[Issue] = []

        for directory in REQUIRED_DIRS.get(project.detected.framework, []):
            if path_exists(root, directory):
                continue
            issues.append(
                self._issue(
                    "STR-001",
                    "high",
                    f"Missing required directory: {directory}",
                    f"The '{directory}' directory is expected for {label} projects.",
                    suggestion=f"Create the '{directory}' directory",
                    auto_fixable=True,
                    fix_hint=(directory,),
                )
            )

        if not path_exists(root, "README.md"):
            issues.append(
                self._issue(
                    "STR-002",
                    "medium",
                    "Missing README.md",
                    "A README.md file is essential for project documentation.",
                    suggestion="Create a README.md with project description and usage instructions",
                )
            )

        if not path_exists(root, ".gitignore"):
            issues.append(
                self._issue(
                    "STR-003",
                    "high",
                    "Missing .gitignore",
                    "A .gitignore file prevents committing unwanted files.",
                    suggestion="Create a .gitignore appropriate for your framework",
                    auto_fixable=True,
                )
            )

        if not path_exists(root, "LICENSE") and not path_exists(root, "LICENSE.md"):
            issues.append(
                self._issue(
                    "STR-004",
                    "low",
                    "Missing LICENSE file",
                    "A LICENSE file clarifies how others can use your code.",
                    suggestion="Add a LICENSE file (MIT, Apache-2.0, etc.)",
                )
            )

        depth = max_directory_depth(root)
        if depth > MAX_DIRECTORY_DEPTH:
            issues.append(
                self._issue(
                    "STR-005",
                    "medium",
                    f"Excessive directory depth: {depth}",
                    "Deep nesting makes code harder to navigate and maintain.",
                    suggestion=f"Consider flattening your directory structure (max recommended: {MAX_DIRECTORY_DEPTH} levels)",
                )
            )

        for forbidden in FORBIDDEN_PATHS:
            if not path_exists(root, forbidden):
                continue
            issues.append(
                self._issue(
                    "STR-006",
                    "critical",
                    f"Forbidden path found: {forbidden}",
                    f"The path '{forbidden}' should not be in the repository.",
                    file_path=forbidden,
                    suggestion=f"Remove '{forbidden}' and add it to .gitignore",
                )
            )

        return issues
