from __future__ import annotations

from pathlib import Path

from repodoctor.analyzers.base import Analyzer, env_is_gitignored
from repodoctor.fs import path_exists
from repodoctor.models import Issue, Project

ESLINT_CONFIGS = [
    ".eslintrc",
    ".eslintrc.js",
    ".eslintrc.cjs",
    ".eslintrc.json",
    ".eslintrc.yml",
    ".eslintrc.yaml",
    "eslint.config.js",
    "eslint.config.mjs",
    "eslint.config.cjs",
]
PRETTIER_CONFIGS = [
    ".prettierrc",
    ".prettierrc.js",
    ".prettierrc.json",
    ".prettierrc.yml",
    ".prettierrc.yaml",
    "prettier.config.js",
]
PHP_LINTER_CONFIGS = ["phpstan.neon", "phpstan.neon.dist", ".php-cs-fixer.php", ".php-cs-fixer.dist.php"]


class ConfigAnalyzer(Analyzer):
    name = "config_files"
    description = "Checks for framework-specific configuration files and common config issues"
    category = "Configuration"

    def analyze(self, project: Project) -> list[Issue]:
        issues: list[Issue] = []
        issues.extend(self._check_framework_config(project))
        issues.extend(self._check_linter_config(project))
        issues.extend(self._check_editorconfig(project))
        issues.extend(self._check_env_committed(project))
        return issues

    def _check_framework_config(self, project: Project) -> list[Issue]:
        root = project.root
        framework = project.detected.framework
        missing: list[tuple[str, str]] = []

        if framework == "symfony":
            if not path_exists(root, ".env.example") and not path_exists(root, ".env.dist"):
                missing.append((".env.example", "Environment example file for team onboarding"))
            if not path_exists(root, "config/packages/doctrine.yaml"):
                missing.append(("config/packages/doctrine.yaml", "Doctrine ORM configuration"))
            if not path_exists(root, "config/packages/security.yaml"):
                missing.append(("config/packages/security.yaml", "Security configuration"))
        elif framework == "laravel":
            if not path_exists(root, ".env.example"):
                missing.append((".env.example", "Environment example file for team onboarding"))
            if not path_exists(root, "config/app.php"):
                missing.append(("config/app.php", "Application configuration"))
            if not path_exists(root, "config/database.php"):
                missing.append(("config/database.php", "Database configuration"))
        elif framework == "flutter":
            if not path_exists(root, "analysis_options.yaml"):
                missing.append(("analysis_options.yaml", "Dart analysis options for linting"))
        elif framework == "nextjs":
            if not path_exists(root, "tsconfig.json") and not path_exists(root, "jsconfig.json"):
                missing.append(
                    ("tsconfig.json", "TypeScript/JavaScript configuration for path aliases and compiler options")
                )
        elif framework == "rust_cargo":
            if not path_exists(root, "rustfmt.toml") and not path_exists(root, ".rustfmt.toml"):
                missing.append(("rustfmt.toml", "Rust formatter configuration"))
        elif framework == "python":
            if not path_exists(root, "setup.cfg") and not _has_pyproject_tool_section(root):
                missing.append(("setup.cfg or pyproject.toml [tool.*]", "Python tooling configuration"))

        label = project.detected.framework_label
        return [
            self._issue(
                "CFG-001",
                "medium",
                f"Missing {file_name}",
                f"{purpose}. This file is recommended for {label} projects.",
                suggestion=f"Create {file_name}",
            )
            for file_name, purpose in missing
        ]

    def _check_linter_config(self, project: Project) -> list[Issue]:
        root = project.root
        framework = project.detected.framework
        if framework == "flutter":
            has_linter = path_exists(root, "analysis_options.yaml")
        elif framework == "rust_cargo":
            has_linter = path_exists(root, "clippy.toml") or path_exists(root, ".clippy.toml")
        elif framework in {"nodejs", "nextjs"}:
            has_linter = any(path_exists(root, name) for name in [*ESLINT_CONFIGS, *PRETTIER_CONFIGS])
        elif framework == "python":
            has_linter = (
                any(path_exists(root, name) for name in (".flake8", "setup.cfg", ".pylintrc"))
                or _has_pyproject_tool_section(root)
            )
        elif framework in {"symfony", "laravel"}:
            has_linter = any(path_exists(root, name) for name in PHP_LINTER_CONFIGS)
        else:
            return []

        if has_linter:
            return []
        return [
            self._issue(
                "CFG-004",
                "medium",
                "Missing linter configuration",
                f"No linter or code style configuration found for {project.detected.framework_label} project.",
                suggestion="Add a linter configuration file to enforce code quality",
            )
        ]

    def _check_editorconfig(self, project: Project) -> list[Issue]:
        if path_exists(project.root, ".editorconfig"):
            return []
        return [
            self._issue(
                "CFG-002",
                "low",
                "Missing .editorconfig",
                "No .editorconfig found. This file helps maintain consistent coding styles across editors.",
                suggestion="Create an .editorconfig file to define coding style rules",
                auto_fixable=True,
                references=("https://editorconfig.org",),
            )
        ]

    def _check_env_committed(self, project: Project) -> list[Issue]:
        if not path_exists(project.root, ".env") or env_is_gitignored(project.root):
            return []
        return [
            self._issue(
                "CFG-003",
                "critical",
                ".env file found in project root",
                ".env file exists and may not be gitignored. This could lead to secret leaks.",
                file_path=".env",
                suggestion="Add .env to .gitignore to prevent committing secrets",
                auto_fixable=True,
                fix_hint=(".env",),
            )
        ]


def _has_pyproject_tool_section(root: Path) -> bool:
    try:
        return "[tool." in (root / "pyproject.toml").read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False
