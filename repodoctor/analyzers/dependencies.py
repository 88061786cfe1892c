from __future__ import annotations

import json
from pathlib import Path
import tomllib
from typing import Any

from repodoctor.analyzers.base import Analyzer
from repodoctor.fs import path_exists
from repodoctor.models import Issue, Project

MAX_DIRECT_DEPENDENCIES = 50
NODE_DEV_PREFIXES = (
    "eslint",
    "@types/",
    "prettier",
    "jest",
    "mocha",
    "chai",
    "typescript",
    "ts-node",
    "nodemon",
    "webpack",
    "babel",
    "@babel/",
    "rollup",
    "vite",
)
PHP_DEV_PREFIXES = (
    "phpunit/",
    "phpstan/",
    "squizlabs/",
    "friendsofphp/",
    "vimeo/psalm",
    "mockery/",
    "fakerphp/",
)
NODE_LOCK_FILES = ("package-lock.json", "yarn.lock", "pnpm-lock.yaml")


class DependenciesAnalyzer(Analyzer):
    name = "dependencies"
    description = "Checks lock files, declared dependencies and version pinning"
    category = "Dependencies"

    def applies_to(self, project: Project) -> bool:
        return project.detected.package_manager is not None

    def analyze(self, project: Project) -> list[Issue]:
        framework = project.detected.framework
        if framework == "rust_cargo":
            return self._check_rust(project.root)
        if framework in {"nodejs", "nextjs"}:
            return self._check_node(project.root)
        if framework in {"symfony", "laravel"}:
            return self._check_php(project.root)
        if framework == "flutter":
            return self._check_flutter(project.root)
        if framework == "python":
            return self._check_python(project.root)
        return []

    def _missing_lock(self, lock_name: str, command: str) -> Issue:
        return self._issue(
            "DEP-001",
            "high",
            f"Missing {lock_name}",
            f"No {lock_name} found. Lock files ensure reproducible builds.",
            suggestion=f"Run `{command}` to generate {lock_name}",
        )

    def _no_dependencies(self, description: str, file_path: str | None) -> Issue:
        return self._issue("DEP-002", "info", "No dependencies declared", description, file_path=file_path)

    def _too_many(self, count: int, manifest: str, description: str) -> Issue:
        return self._issue(
            "DEP-005",
            "low",
            f"Too many direct dependencies ({count})",
            description,
            file_path=manifest,
            suggestion="Review dependencies and remove unused ones",
        )

    def _check_rust(self, root: Path) -> list[Issue]:
        issues: list[Issue] = []
        if not path_exists(root, "Cargo.lock"):
            issues.append(self._missing_lock("Cargo.lock", "cargo build"))

        manifest = _load_toml(root / "Cargo.toml")
        if manifest is None:
            return issues
        dependencies = manifest.get("dependencies")
        count = len(dependencies) if isinstance(dependencies, dict) else 0
        if count == 0:
            issues.append(self._no_dependencies("Cargo.toml has no [dependencies] entries.", "Cargo.toml"))
        elif count > MAX_DIRECT_DEPENDENCIES:
            issues.append(
                self._too_many(
                    count,
                    "Cargo.toml",
                    f"Project has {count} direct dependencies. Consider reducing to improve compile times.",
                )
            )
        return issues

    def _check_node(self, root: Path) -> list[Issue]:
        issues: list[Issue] = []
        if not any(path_exists(root, name) for name in NODE_LOCK_FILES):
            issues.append(
                self._issue(
                    "DEP-001",
                    "high",
                    "Missing lock file",
                    "No package-lock.json, yarn.lock, or pnpm-lock.yaml found.",
                    suggestion="Run `npm install` to generate a lock file",
                )
            )

        manifest = _load_json(root / "package.json")
        if manifest is None:
            return issues
        issues.extend(
            self._check_manifest_sections(
                manifest,
                manifest_name="package.json",
                prod_key="dependencies",
                dev_key="devDependencies",
                dev_prefixes=NODE_DEV_PREFIXES,
            )
        )
        return issues

    def _check_php(self, root: Path) -> list[Issue]:
        issues: list[Issue] = []
        if not path_exists(root, "composer.lock"):
            issues.append(self._missing_lock("composer.lock", "composer install"))

        manifest = _load_json(root / "composer.json")
        if manifest is None:
            return issues
        issues.extend(
            self._check_manifest_sections(
                manifest,
                manifest_name="composer.json",
                prod_key="require",
                dev_key="require-dev",
                dev_prefixes=PHP_DEV_PREFIXES,
            )
        )
        return issues

    def _check_manifest_sections(
        self,
        manifest: dict[str, Any],
        manifest_name: str,
        prod_key: str,
        dev_key: str,
        dev_prefixes: tuple[str, ...],
    ) -> list[Issue]:
        issues: list[Issue] = []
        prod = manifest.get(prod_key)
        dev = manifest.get(dev_key)
        prod = prod if isinstance(prod, dict) else {}
        dev = dev if isinstance(dev, dict) else {}

        if not prod and not dev:
            issues.append(self._no_dependencies(f"{manifest_name} has no {prod_key} or {dev_key} entries.", manifest_name))

        misplaced = [name for name in prod if name.lower().startswith(dev_prefixes)]
        if misplaced:
            issues.append(
                self._issue(
                    "DEP-003",
                    "medium",
                    "Dev dependencies in production section",
                    f"These packages are likely {dev_key} but are listed in {prod_key}: {', '.join(misplaced)}",
                    file_path=manifest_name,
                    suggestion=f"Move development-only packages to {dev_key}",
                )
            )

        if len(prod) > MAX_DIRECT_DEPENDENCIES:
            issues.append(
                self._too_many(
                    len(prod),
                    manifest_name,
                    f"{manifest_name} has {len(prod)} production dependencies.",
                )
            )
        return issues

    def _check_flutter(self, root: Path) -> list[Issue]:
        if path_exists(root, "pubspec.lock"):
            return []
        return [self._missing_lock("pubspec.lock", "flutter pub get")]

    def _check_python(self, root: Path) -> list[Issue]:
        issues: list[Issue] = []
        has_requirements = path_exists(root, "requirements.txt")
        has_pyproject = path_exists(root, "pyproject.toml")

        if not has_requirements and not has_pyproject:
            issues.append(self._no_dependencies("No requirements.txt or pyproject.toml found.", None))

        if has_requirements:
            unpinned = _unpinned_requirements(root / "requirements.txt")
            if unpinned:
                issues.append(
                    self._issue(
                        "DEP-004",
                        "medium",
                        "Unpinned dependency versions",
                        f"These dependencies lack pinned versions (==): {', '.join(unpinned)}",
                        file_path="requirements.txt",
                        suggestion="Pin versions with == for reproducible builds (e.g., requests==2.28.0)",
                    )
                )

        pyproject = _load_toml(root / "pyproject.toml") if has_pyproject else None
        uses_poetry = isinstance(pyproject, dict) and isinstance(pyproject.get("tool"), dict) and "poetry" in pyproject["tool"]
        if uses_poetry and not path_exists(root, "poetry.lock"):
            issues.append(self._missing_lock("poetry.lock", "poetry lock"))
        return issues


def _unpinned_requirements(path: Path) -> list[str]:
    try:
        source = path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return []
    unpinned: list[str] = []
    for line in source.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(("#", "-")):
            continue
        if "==" not in stripped:
            unpinned.append(stripped)
    return unpinned


def _load_json(path: Path) -> dict[str, Any] | None:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return None
    return payload if isinstance(payload, dict) else None


def _load_toml(path: Path) -> dict[str, Any] | None:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except (OSError, tomllib.TOMLDecodeError):
        return None
