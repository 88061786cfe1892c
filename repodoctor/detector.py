from __future__ import annotations

import json
from pathlib import Path
import tomllib

from repodoctor.fs import detect_ci_provider, has_git_repo, path_exists
from repodoctor.models import DetectedProject, Project

# Most specific indicators first: a Next.js app also ships a package.json.
FRAMEWORK_INDICATORS: list[tuple[str, str, str, str | None]] = [
    ("symfony.lock", "symfony", "php", "composer"),
    ("config/bundles.php", "symfony", "php", "composer"),
    ("artisan", "laravel", "php", "composer"),
    ("pubspec.yaml", "flutter", "dart", "pub"),
    ("next.config.js", "nextjs", "javascript", None),
    ("next.config.mjs", "nextjs", "javascript", None),
    ("next.config.ts", "nextjs", "typescript", None),
    ("Cargo.toml", "rust_cargo", "rust", "cargo"),
    ("package.json", "nodejs", "javascript", None),
    ("pyproject.toml", "python", "python", "poetry"),
    ("requirements.txt", "python", "python", "pip"),
]
JS_LOCK_FILES: list[tuple[str, str]] = [
    ("yarn.lock", "yarn"),
    ("pnpm-lock.yaml", "pnpm"),
    ("package-lock.json", "npm"),
]


def detect_project(path: str | Path) -> Project:
    root = Path(path).resolve()
    if not root.exists():
        raise FileNotFoundError(f"Project path not found: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Project path is not a directory: {root}")
    return Project(root=root, detected=detect_framework(root))


def detect_framework(root: Path) -> DetectedProject:
    has_git = has_git_repo(root)
    ci_provider = detect_ci_provider(root)

    for indicator, framework, language, package_manager in FRAMEWORK_INDICATORS:
        if not path_exists(root, indicator):
            continue
        return DetectedProject(
            framework=framework,
            language=language,
            version=_detect_version(root, framework),
            package_manager=package_manager or _detect_js_package_manager(root),
            has_git=has_git,
            ci_provider=ci_provider,
        )

    return DetectedProject(has_git=has_git, ci_provider=ci_provider)


def _detect_version(root: Path, framework: str) -> str | None:
    if framework == "rust_cargo":
        return _version_from_toml(root / "Cargo.toml", ("package",))
    if framework == "python":
        return _version_from_toml(root / "pyproject.toml", ("project",), ("tool", "poetry"))
    if framework in {"nodejs", "nextjs"}:
        return _version_from_package_json(root / "package.json")
    if framework == "flutter":
        return _version_from_pubspec(root / "pubspec.yaml")
    return None


def _version_from_toml(path: Path, *tables: tuple[str, ...]) -> str | None:
    try:
        with path.open("rb") as fh:
            payload = tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for keys in tables:
        section = payload
        for key in keys:
            section = section.get(key) if isinstance(section, dict) else None
        if isinstance(section, dict) and isinstance(section.get("version"), str):
            return section["version"]
    return None


def _version_from_package_json(path: Path) -> str | None:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    if isinstance(payload, dict) and isinstance(payload.get("version"), str):
        return payload["version"]
    return None


def _version_from_pubspec(path: Path) -> str | None:
    try:
        source = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None
    for line in source.splitlines():
        stripped = line.strip()
        if stripped.startswith("version:"):
            return stripped[len("version:"):].strip()
    return None


def _detect_js_package_manager(root: Path) -> str | None:
    for lock_file, manager in JS_LOCK_FILES:
        if (root / lock_file).exists():
            return manager
    return None
