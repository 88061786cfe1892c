from __future__ import annotations

from collections.abc import Callable, Sequence
import time

import structlog

from repodoctor.analyzers import Analyzer, default_analyzers
from repodoctor.config import Config, load_config
from repodoctor.models import SEVERITY_ORDER, Issue, Project, ScanResult
from repodoctor.score import calculate_health_score

logger = structlog.get_logger(__name__)


class Scanner:
    """Runs an ordered list of analyzers against one project.

    Issues are filtered through the project's ``Config``, stable-sorted by
    descending severity (ties keep registration and emission order) and
    scored. Any analyzer exception aborts the scan.
    """

    def __init__(self, analyzers: Sequence[Analyzer]) -> None:
        self.analyzers = list(analyzers)

    def scan(
        self,
        project: Project,
        config: Config | None = None,
        on_analyzer: Callable[[str], None] | None = None,
    ) -> ScanResult:
        started = time.perf_counter()
        if config is None:
            config = load_config(project.root)
        logger.debug("scan_started", root=str(project.root), framework=project.detected.framework)

        issues: list[Issue] = []
        for analyzer in self.analyzers:
            if not analyzer.applies_to(project):
                logger.debug("analyzer_skipped", analyzer=analyzer.name)
                continue
            if on_analyzer is not None:
                on_analyzer(analyzer.name)
            found = analyzer.analyze(project)
            logger.debug("analyzer_finished", analyzer=analyzer.name, issues=len(found))
            issues.extend(found)

        filtered = sort_issues(config.filter_issues(issues))
        score = calculate_health_score(filtered)
        duration = time.perf_counter() - started
        logger.debug(
            "scan_finished",
            issues=len(filtered),
            filtered_out=len(issues) - len(filtered),
            score=score.total,
            duration=round(duration, 3),
        )
        return ScanResult(project=project, issues=filtered, score=score, duration=duration)


def sort_issues(issues: list[Issue]) -> list[Issue]:
    return sorted(issues, key=lambda issue: SEVERITY_ORDER[issue.severity], reverse=True)


def default_scanner() -> Scanner:
    return Scanner(default_analyzers())
