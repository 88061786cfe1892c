from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from repodoctor.fixers.base import Fixer
from repodoctor.fixers.directory import DirectoryFixer
from repodoctor.fixers.editorconfig import EditorConfigFixer
from repodoctor.fixers.gitignore import GitignoreFixer
from repodoctor.models import FixOutcome, Issue, Project

logger = structlog.get_logger(__name__)

NO_FIXER_REASON = "No fixer available"


class FixerRegistry:
    def __init__(self, fixers: Sequence[Fixer]) -> None:
        self.fixers = list(fixers)

    def find_fixer(self, rule_id: str) -> Fixer | None:
        for fixer in self.fixers:
            if rule_id in fixer.handles():
                return fixer
        return None

    def apply_fixes(
        self,
        issues: Iterable[Issue],
        project: Project,
        dry_run: bool = False,
    ) -> list[tuple[str, FixOutcome]]:
        """Produce one outcome per issue, in input order.

        A failing fixer is reported as an error outcome and never stops the
        rest of the batch. Dry runs only call ``describe``.
        """
        results: list[tuple[str, FixOutcome]] = []
        for issue in issues:
            results.append((issue.rule_id, self._fix_one(issue, project, dry_run)))
        return results

    def _fix_one(self, issue: Issue, project: Project, dry_run: bool) -> FixOutcome:
        fixer = self.find_fixer(issue.rule_id)
        if fixer is None:
            return FixOutcome.skipped(NO_FIXER_REASON)
        if dry_run:
            return FixOutcome.dry_run(fixer.describe(issue, project))

        try:
            result = fixer.apply(issue, project)
        except Exception as exc:
            logger.warning("fix_failed", rule_id=issue.rule_id, fixer=type(fixer).__name__, error=str(exc))
            return FixOutcome.error(str(exc))

        if result.status == "applied":
            logger.info("fix_applied", rule_id=issue.rule_id, description=result.message)
            return FixOutcome.applied(result.message)
        logger.debug("fix_skipped", rule_id=issue.rule_id, reason=result.message)
        return FixOutcome.skipped(result.message)


def default_registry() -> FixerRegistry:
    return FixerRegistry([DirectoryFixer(), GitignoreFixer(), EditorConfigFixer()])
