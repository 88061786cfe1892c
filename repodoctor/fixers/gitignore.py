from __future__ import annotations

from repodoctor.fixers.base import Fixer
from repodoctor.models import FixResult, Issue, Project

GITIGNORE_TEMPLATES: dict[str, str] = {
    "symfony": "vendor/\nvar/\n.env\n.env.local\n",
    "flutter": "build/\n.dart_tool/\n.flutter-plugins\n.flutter-plugins-dependencies\n",
    "nextjs": ".next/\nnode_modules/\n.env.local\n.env*.local\n",
    "rust_cargo": "target/\n",
}
DEFAULT_GITIGNORE_TEMPLATE = ".env\n*.log\n.DS_Store\n"
MISSING_ENTRIES_PREFIX = ".gitignore missing: "
FIXED_ENTRIES: dict[str, list[str]] = {
    "CFG-003": [".env"],
    "SEC-003": [".env"],
    "NJS-050": [".env*.local"],
}
HINTED_RULES = {"SYM-050", "FLT-053"}


class GitignoreFixer(Fixer):
    rule_ids = frozenset({"STR-003", *FIXED_ENTRIES, *HINTED_RULES})

    def describe(self, issue: Issue, project: Project) -> str:
        if issue.rule_id == "STR-003":
            return f"Create .gitignore with {project.detected.framework_label} template"
        return f"Append to .gitignore: {', '.join(entries_to_append(issue))}"

    def apply(self, issue: Issue, project: Project) -> FixResult:
        gitignore_path = project.root / ".gitignore"

        if issue.rule_id == "STR-003":
            if gitignore_path.exists():
                return FixResult.skipped(".gitignore already exists")
            template = GITIGNORE_TEMPLATES.get(project.detected.framework, DEFAULT_GITIGNORE_TEMPLATE)
            gitignore_path.write_text(template, encoding="utf-8")
            return FixResult.applied(f"Created .gitignore with {project.detected.framework_label} template")

        entries = entries_to_append(issue)
        if not entries:
            return FixResult.skipped("No entries to append")

        content = gitignore_path.read_text(encoding="utf-8") if gitignore_path.exists() else ""
        present = {line.strip() for line in content.splitlines()}
        added: list[str] = []
        for entry in entries:
            if entry in present:
                continue
            if content and not content.endswith("\n"):
                content += "\n"
            content += f"{entry}\n"
            present.add(entry)
            added.append(entry)

        if not added:
            return FixResult.skipped("All entries already present in .gitignore")
        gitignore_path.write_text(content, encoding="utf-8")
        return FixResult.applied(f"Added to .gitignore: {', '.join(added)}")


def entries_to_append(issue: Issue) -> list[str]:
    if issue.rule_id in FIXED_ENTRIES:
        return list(FIXED_ENTRIES[issue.rule_id])
    if issue.rule_id not in HINTED_RULES:
        return []
    if issue.fix_hint:
        return [entry.strip() for entry in issue.fix_hint if entry.strip()]
    if issue.title.startswith(MISSING_ENTRIES_PREFIX):
        suffix = issue.title[len(MISSING_ENTRIES_PREFIX):]
        return [entry.strip() for entry in suffix.split(",") if entry.strip()]
    return []
