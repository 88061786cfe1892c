from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

from repodoctor.models import SEVERITY_ORDER, Issue, Severity

logger = structlog.get_logger(__name__)

CONFIG_FILENAME = ".repodoctor.yml"
DEFAULT_IGNORE_PATHS: dict[str, list[str]] = {
    "symfony": ["vendor/", "var/", "node_modules/"],
    "laravel": ["vendor/", "var/", "node_modules/"],
    "flutter": ["build/", ".dart_tool/", ".flutter-plugins"],
    "nextjs": ["node_modules/", ".next/", "dist/"],
    "nodejs": ["node_modules/", ".next/", "dist/"],
    "rust_cargo": ["target/"],
    "python": ["__pycache__/", ".venv/", "dist/"],
}
FALLBACK_IGNORE_PATHS = ["node_modules/", "vendor/"]


class ConfigError(ValueError):
    pass


@dataclass(slots=True)
class IgnoreConfig:
    paths: list[str] = field(default_factory=list)
    rules: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Config:
    severity_threshold: str | None = None
    ignore: IgnoreConfig | None = None

    def minimum_severity(self) -> Severity:
        if self.severity_threshold is None:
            return "info"
        normalized = str(self.severity_threshold).strip().lower()
        if normalized not in SEVERITY_ORDER:
            return "info"
        return normalized  # type: ignore[return-value]

    def filter_issues(self, issues: Iterable[Issue]) -> list[Issue]:
        threshold = SEVERITY_ORDER[self.minimum_severity()]
        ignored_rules = set(self.ignore.rules) if self.ignore else set()
        ignored_prefixes = _normalize_prefixes(self.ignore.paths) if self.ignore else []

        kept: list[Issue] = []
        for issue in issues:
            if SEVERITY_ORDER[issue.severity] < threshold:
                continue
            if issue.rule_id in ignored_rules:
                continue
            if issue.file_path is not None and any(
                issue.file_path.startswith(prefix) for prefix in ignored_prefixes
            ):
                continue
            kept.append(issue)
        return kept


def _normalize_prefixes(paths: Iterable[str]) -> list[str]:
    prefixes: list[str] = []
    for raw in paths:
        prefix = str(raw).rstrip("/")
        if prefix:
            prefixes.append(prefix)
    return prefixes


def load_config(project_root: str | Path, path: str | None = None) -> Config:
    if path is None:
        cfg_path = Path(project_root) / CONFIG_FILENAME
        if not cfg_path.exists():
            return Config()
    else:
        cfg_path = Path(path)
        if not cfg_path.exists():
            raise FileNotFoundError(f"Config file not found: {cfg_path}")

    try:
        payload = yaml.safe_load(cfg_path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise ConfigError(f"{cfg_path} is not valid UTF-8: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {cfg_path}: {exc}") from exc

    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ConfigError(f"{cfg_path} must contain a mapping at the top level.")

    logger.debug("config_loaded", path=str(cfg_path))
    return _config_from_payload(payload)


def _config_from_payload(payload: dict[str, Any]) -> Config:
    config = Config()
    threshold = payload.get("severity_threshold")
    config.severity_threshold = None if threshold is None else str(threshold)

    ignore = payload.get("ignore")
    if isinstance(ignore, dict):
        config.ignore = IgnoreConfig(
            paths=_as_list(ignore.get("paths")),
            rules=_as_list(ignore.get("rules")),
        )
    elif ignore is not None:
        raise ConfigError("'ignore' must be a mapping with 'paths' and/or 'rules' lists.")
    return config


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    # A mapping is kept whole so validate_config rejects it.
    if isinstance(value, (str, int, dict)):
        return [value]
    return list(value)


def validate_config(config: Config) -> list[str]:
    errors: list[str] = []
    if config.severity_threshold is not None and (
        config.severity_threshold.strip().lower() not in SEVERITY_ORDER
    ):
        errors.append("severity_threshold must be one of: info, low, medium, high, critical")

    if config.ignore is not None:
        for name, values in (("paths", config.ignore.paths), ("rules", config.ignore.rules)):
            if any(not isinstance(value, str) for value in values):
                errors.append(f"ignore.{name} entries must be strings")
    return errors


def render_config_template(framework: str) -> str:
    ignore_paths = DEFAULT_IGNORE_PATHS.get(framework, FALLBACK_IGNORE_PATHS)
    rendered_paths = "\n".join(f"    - {path}" for path in ignore_paths)
    return (
        "# repodoctor configuration\n"
        "\n"
        "# Minimum severity to report (info, low, medium, high, critical)\n"
        "severity_threshold: low\n"
        "\n"
        "# Path prefixes and rule ids to ignore\n"
        "ignore:\n"
        "  paths:\n"
        f"{rendered_paths}\n"
        "  rules: []\n"
        "    # - DOC-003\n"
    )
