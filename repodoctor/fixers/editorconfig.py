from __future__ import annotations

from repodoctor.fixers.base import Fixer
from repodoctor.models import FixResult, Issue, Project

EDITORCONFIG_TEMPLATE = """root = true

[*]
indent_style = space
indent_size = 4
end_of_line = lf
charset = utf-8
trim_trailing_whitespace = true
insert_final_newline = true
"""


class EditorConfigFixer(Fixer):
    rule_ids = frozenset({"CFG-002"})

    def describe(self, issue: Issue, project: Project) -> str:
        return "Create .editorconfig with standard settings"

    def apply(self, issue: Issue, project: Project) -> FixResult:
        path = project.root / ".editorconfig"
        if path.exists():
            return FixResult.skipped(".editorconfig already exists")
        path.write_text(EDITORCONFIG_TEMPLATE, encoding="utf-8")
        return FixResult.applied("Created .editorconfig")
