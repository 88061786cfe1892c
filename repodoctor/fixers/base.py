from __future__ import annotations

from repodoctor.models import FixResult, Issue, Project


class Fixer:
    """Base class for fixers.

    ``describe`` must not touch the filesystem. ``apply`` must be idempotent:
    on an already fixed tree it returns a skipped result. Filesystem errors
    propagate as ``OSError``.
    """

    rule_ids: frozenset[str] = frozenset()

    def handles(self) -> frozenset[str]:
        return self.rule_ids

    def describe(self, issue: Issue, project: Project) -> str:
        raise NotImplementedError

    def apply(self, issue: Issue, project: Project) -> FixResult:
        raise NotImplementedError
