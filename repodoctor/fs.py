from __future__ import annotations

from collections.abc import Iterator
import os
from pathlib import Path

SKIP_DIR_NAMES = {"node_modules", "vendor", "target", "__pycache__"}
CI_INDICATORS: list[tuple[str, str]] = [
    (".github/workflows", "github_actions"),
    (".gitlab-ci.yml", "gitlab_ci"),
    (".circleci/config.yml", "circleci"),
    (".travis.yml", "travis_ci"),
    ("Jenkinsfile", "jenkins"),
]


def path_exists(base: Path, relative: str) -> bool:
    return (base / relative).exists()


def has_git_repo(path: Path) -> bool:
    return (path / ".git").is_dir()


def detect_ci_provider(path: Path) -> str | None:
    for indicator, provider in CI_INDICATORS:
        candidate = path / indicator
        if indicator == ".github/workflows":
            if candidate.is_dir():
                return provider
        elif candidate.exists():
            return provider
    return None


def _walk(root: Path, skip_names: set[str], skip_hidden: bool) -> Iterator[tuple[Path, list[str], list[str]]]:
    def _on_error(exc: OSError) -> None:
        # Unreadable subdirectories are skipped, an unreadable root is fatal.
        if exc.filename is not None and Path(exc.filename) == root:
            raise exc

    for dirpath, dirnames, filenames in os.walk(root, topdown=True, onerror=_on_error, followlinks=False):
        dirnames[:] = sorted(
            name
            for name in dirnames
            if not (skip_hidden and name.startswith(".")) and name not in skip_names
        )
        yield Path(dirpath), dirnames, sorted(filenames)


def iter_files(
    root: Path,
    skip_dirs: set[str] | None = None,
    skip_hidden: bool = True,
) -> Iterator[Path]:
    """Yield files below ``root`` in a stable, sorted order."""
    skip_names = SKIP_DIR_NAMES if skip_dirs is None else skip_dirs
    for dir_path, _, filenames in _walk(root, skip_names, skip_hidden):
        for filename in filenames:
            yield dir_path / filename


def max_directory_depth(root: Path) -> int:
    max_depth = 0
    for dir_path, dirnames, _ in _walk(root, SKIP_DIR_NAMES, True):
        depth = len(dir_path.relative_to(root).parts)
        if dirnames:
            depth += 1
        max_depth = max(max_depth, depth)
    return max_depth


def relative_path(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()
