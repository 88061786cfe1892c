from __future__ import annotations

from pathlib import Path

from repodoctor.analyzers.base import Analyzer
from repodoctor.fs import iter_files, path_exists
from repodoctor.models import Issue, Project

TEST_DIRS: dict[str, list[str]] = {
    "symfony": ["tests"],
    "laravel": ["tests"],
    "flutter": ["test"],
    "nextjs": ["__tests__", "tests", "test", "spec"],
    "nodejs": ["__tests__", "tests", "test", "spec"],
    "rust_cargo": ["tests"],
    "python": ["tests", "test"],
}
DEFAULT_TEST_DIRS = ["tests", "test", "__tests__", "spec"]
TEST_CONFIGS: dict[str, list[str]] = {
    "symfony": ["phpunit.xml", "phpunit.xml.dist"],
    "laravel": ["phpunit.xml", "phpunit.xml.dist"],
    "flutter": ["test"],
    "nextjs": ["jest.config.js", "jest.config.ts", "vitest.config.js", "vitest.config.ts", ".mocharc.yml", ".mocharc.json"],
    "nodejs": ["jest.config.js", "jest.config.ts", "vitest.config.js", "vitest.config.ts", ".mocharc.yml", ".mocharc.json"],
    "python": ["pytest.ini", "pyproject.toml", "setup.cfg", "tox.ini"],
}
SOURCE_EXTENSIONS: dict[str, set[str]] = {
    "symfony": {".php"},
    "laravel": {".php"},
    "flutter": {".dart"},
    "nextjs": {".js", ".ts", ".jsx", ".tsx"},
    "nodejs": {".js", ".ts", ".jsx", ".tsx"},
    "rust_cargo": {".rs"},
    "python": {".py"},
}
DEFAULT_SOURCE_EXTENSIONS = {".rs", ".py", ".js", ".ts", ".php", ".dart"}
SOURCE_DIRS = ["src", "lib", "app"]
MIN_TEST_RATIO = 0.2


class TestingAnalyzer(Analyzer):
    name = "testing"
    description = "Checks testing setup, configuration, and coverage"
    category = "Testing"

    def analyze(self, project: Project) -> list[Issue]:
        root = project.root
        framework = project.detected.framework
        test_dirs = TEST_DIRS.get(framework, DEFAULT_TEST_DIRS)
        extensions = SOURCE_EXTENSIONS.get(framework, DEFAULT_SOURCE_EXTENSIONS)
        issues: list[Issue] = []

        has_test_dir = any(path_exists(root, name) for name in test_dirs)
        if not has_test_dir:
            issues.append(
                self._issue(
                    "TST-001",
                    "high",
                    "No test directory found",
                    f"Expected one of: {', '.join(test_dirs)}",
                    suggestion=f"Create a {test_dirs[0]} directory with test files",
                )
            )

        test_configs = TEST_CONFIGS.get(framework, [])
        if test_configs and not any(path_exists(root, name) for name in test_configs):
            issues.append(
                self._issue(
                    "TST-002",
                    "medium",
                    "No test configuration found",
                    f"Expected one of: {', '.join(test_configs)}",
                    suggestion="Add a test configuration file for your testing framework",
                )
            )

        source_count = _count_files(root, SOURCE_DIRS, extensions)
        if source_count == 0 or not has_test_dir:
            return issues

        test_count = _count_files(root, test_dirs, extensions)
        if test_count == 0:
            issues.append(
                self._issue(
                    "TST-003",
                    "high",
                    "Test directory exists but contains no test files",
                    f"Found {source_count} source files but 0 test files.",
                    suggestion="Add test files to cover your source code",
                )
            )
            return issues

        ratio = test_count / source_count
        if ratio < MIN_TEST_RATIO:
            issues.append(
                self._issue(
                    "TST-004",
                    "medium",
                    "Low test-to-source file ratio",
                    f"Found {test_count} test files for {source_count} source files "
                    f"(ratio: {ratio * 100:.0f}%). Consider adding more tests.",
                    suggestion="Aim for at least 1 test file per 3 source files",
                )
            )
        return issues


def _count_files(root: Path, directories: list[str], extensions: set[str]) -> int:
    count = 0
    for name in directories:
        directory = root / name
        if not directory.is_dir():
            continue
        count += sum(
            1
            for file_path in iter_files(directory, skip_dirs=set(), skip_hidden=False)
            if file_path.suffix in extensions
        )
    return count
