from __future__ import annotations

from pathlib import Path
import re

from repodoctor.analyzers.base import Analyzer, env_is_gitignored, project_file
from repodoctor.fs import iter_files, path_exists
from repodoctor.models import Issue, Project

# Resource ceilings for secret scanning on large trees.
MAX_FILES = 500
MAX_LINES = 1000

SCANNABLE_EXTENSIONS = {
    ".env",
    ".yml",
    ".yaml",
    ".json",
    ".toml",
    ".php",
    ".js",
    ".ts",
    ".py",
    ".rs",
    ".dart",
    ".rb",
    ".go",
    ".cfg",
    ".ini",
    ".conf",
    ".properties",
}
SKIP_DIRS = {"node_modules", "vendor", "target", ".git", ".svn", "__pycache__", ".tox", "dist", "build"}
SKIP_FILES = {
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "Cargo.lock",
    "composer.lock",
    "pubspec.lock",
    "poetry.lock",
    "Gemfile.lock",
}
SECRET_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("API key", re.compile(r"(api[_\-]?key|apikey)[\"']?\s*[=:]\s*[\"']?[a-zA-Z0-9]{16,}", re.IGNORECASE)),
    ("Password", re.compile(r"(password|passwd|pwd)\s*[=:]\s*[\"'][^\"']{4,}[\"']", re.IGNORECASE)),
    ("Secret/Token", re.compile(r"(secret|token|auth)\s*[=:]\s*[\"'][^\"']{8,}[\"']", re.IGNORECASE)),
    ("AWS Access Key", re.compile(r"AKIA[0-9A-Z]{16}")),
    ("Private key", re.compile(r"-----BEGIN (RSA |EC |DSA )?PRIVATE KEY-----")),
]


class SecurityAnalyzer(Analyzer):
    name = "security"
    description = "Scans for potential secrets, credentials, and security issues"
    category = "Security"

    def analyze(self, project: Project) -> list[Issue]:
        issues: list[Issue] = []
        issues.extend(self._check_env_gitignore(project))
        for file_path in _collect_scannable_files(project.root):
            issues.extend(self._scan_file(project, file_path))
        return issues

    def _check_env_gitignore(self, project: Project) -> list[Issue]:
        if not path_exists(project.root, ".env") or env_is_gitignored(project.root):
            return []
        return [
            self._issue(
                "SEC-003",
                "high",
                ".env file without .gitignore entry",
                ".env file exists but is not listed in .gitignore. Secrets may be committed to version control.",
                file_path=".env",
                suggestion="Add .env to .gitignore",
                auto_fixable=True,
                fix_hint=(".env",),
            )
        ]

    def _scan_file(self, project: Project, file_path: Path) -> list[Issue]:
        try:
            source = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return []

        rendered = project_file(project, file_path)
        if "-----BEGIN" in source and "PRIVATE KEY-----" in source:
            return [
                self._issue(
                    "SEC-002",
                    "critical",
                    "Private key file detected",
                    f"File appears to contain a private key: {rendered}",
                    file_path=rendered,
                    suggestion="Remove private keys from the repository and use a secrets manager",
                )
            ]

        issues: list[Issue] = []
        for idx, line in enumerate(source.splitlines()[:MAX_LINES], start=1):
            for name, pattern in SECRET_PATTERNS:
                if not pattern.search(line):
                    continue
                issues.append(
                    self._issue(
                        "SEC-001",
                        "critical",
                        f"Potential {name} found",
                        f"Possible {name} detected in {rendered}",
                        file_path=rendered,
                        line=idx,
                        suggestion="Remove credentials and use environment variables or a secrets manager",
                    )
                )
                break
        return issues


def _collect_scannable_files(root: Path) -> list[Path]:
    files: list[Path] = []
    for file_path in iter_files(root, skip_dirs=SKIP_DIRS, skip_hidden=False):
        if len(files) >= MAX_FILES:
            break
        if file_path.name in SKIP_FILES:
            continue
        if _scannable_suffix(file_path) in SCANNABLE_EXTENSIONS:
            files.append(file_path)
    return files


def _scannable_suffix(file_path: Path) -> str:
    # ".env" has no suffix for pathlib, "config.env" does.
    if file_path.name == ".env":
        return ".env"
    return file_path.suffix.lower()
