"""Load rule configuration from YAML or JSON."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .models import Config, RuleConfig, Severity

# Looked up in the scan root when no explicit file is given; first match wins
CONFIG_FILES = (
    "lineup.yaml",
    "lineup.yml",
    ".lineup.yaml",
    ".lineup.yml",
    "lineup.json",
    ".lineuprc.json",
)


def find_config(root: Path) -> Path | None:
    """First config file present in root, or None."""
    if not root.is_dir():
        return None
    for name in CONFIG_FILES:
        p = root / name
        if p.is_file():
            return p
    return None


def load_config(path: Path | None) -> Config:
    """Read and validate a config file. None means defaults."""
    if path is None:
        return Config()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config {path}: {e.strerror or e}") from e
    return parse_config(text, source=str(path))


def parse_config(text: str, source: str = "<config>") -> Config:
    """Parse a config document. JSON is accepted since it is valid YAML."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid config {source}: {e}") from e
    return config_from_dict(data, source)


def config_from_dict(data: Any, source: str = "<config>") -> Config:
    """Build a Config from ``{"rules": {id: {...}}}`` or a bare ``{id: {...}}`` mapping."""
    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config {source}: top level must be a mapping")
    rules = data["rules"] if "rules" in data else data
    if rules is None:
        return Config()
    if not isinstance(rules, dict):
        raise ConfigError(f"Invalid config {source}: 'rules' must be a mapping")
    return Config(rules={str(rule_id): _rule_config(rule_id, entry, source) for rule_id, entry in rules.items()})


def _rule_config(rule_id: str, entry: Any, source: str) -> RuleConfig:
    # Shorthand: `rule-id: false` disables, `rule-id: warning` sets severity
    if entry is None:
        return RuleConfig()
    if isinstance(entry, bool):
        return RuleConfig(enabled=entry)
    if isinstance(entry, str):
        return RuleConfig(severity=_severity(rule_id, entry, source))
    if not isinstance(entry, dict):
        raise ConfigError(f"Invalid config {source}: rule '{rule_id}' must be a mapping")

    enabled = entry.get("enabled", True)
    if not isinstance(enabled, bool):
        raise ConfigError(f"Invalid config {source}: '{rule_id}.enabled' must be true or false")
    severity = entry.get("severity")
    return RuleConfig(
        enabled=enabled,
        severity=_severity(rule_id, severity, source) if severity is not None else None,
        options=entry.get("options"),
    )


def _severity(rule_id: str, value: Any, source: str) -> Severity:
    try:
        return Severity(str(value).lower())
    except ValueError:
        allowed = ", ".join(s.value for s in Severity)
        raise ConfigError(
            f"Invalid config {source}: '{rule_id}' severity '{value}' (expected one of {allowed})"
        ) from None
