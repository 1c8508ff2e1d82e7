"""Configuration loading and validation."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from repo_relocator.models import RewriteIntent

MODES = ("get-authors", "dry", "apply", "yolo")
PROTOCOLS = ("https", "ssh")

TOKEN_ENV_VAR = "RELOCATE_GITHUB_TOKEN"


class ConfigError(Exception):
    """Raised when the configuration cannot be loaded or is invalid."""


@dataclass
class Config:
    mode: str = ""
    github_username: str = ""
    github_token: str | None = None
    protocol: str = "https"
    working_directory: Path = field(default_factory=lambda: Path.home() / "repo-relocator" / "work")
    create_backups: bool = True
    target_owner: str | None = None
    jobs: int = 8
    api_url: str = "https://api.github.com"
    rewrite: RewriteIntent = field(default_factory=RewriteIntent)

    @property
    def repos_path(self) -> Path:
        return self.working_directory / "repos"

    @property
    def backups_path(self) -> Path:
        return self.working_directory / "backups"


def expand_env_var(value: str) -> str:
    """Expand environment variables in string (e.g. ${VAR})."""
    if value.startswith("${") and value.endswith("}"):
        env_var = value[2:-1]
        return os.environ.get(env_var, value)
    return value


def expand_path(path_str: str) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expandvars(os.path.expanduser(path_str)))


def _literal(value: object, where: str) -> str:
    # YAML reads unquoted yes/no/on/off as booleans
    if isinstance(value, bool):
        raise ConfigError(f"{where} is a boolean ({value}); quote it to use it as text")
    if isinstance(value, (dict, list)):
        raise ConfigError(f"{where} must be a plain value")
    return "" if value is None else str(value)


def _string_list(value: object, key: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"rewrite.{key} must be a list")
    return [_literal(v, f"rewrite.{key} entry") for v in value if v is not None]


def _replacements(value: dict) -> dict[str, str]:
    replacements = {}
    for old, new in value.items():
        if old is None:
            raise ConfigError("rewrite.text_replacements has an empty key")
        key = _literal(old, f"rewrite.text_replacements key {old!r}")
        replacements[key] = _literal(new, f"rewrite.text_replacements value for {key!r}")
    return replacements


def _int(value: object, key: str, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be an integer, got {value!r}") from e


def _parse_rewrite(data: dict) -> RewriteIntent:
    replacements = data.get("text_replacements") or {}
    if not isinstance(replacements, dict):
        raise ConfigError("rewrite.text_replacements must be a mapping")

    new_name = data.get("new_author_name")
    new_email = data.get("new_author_email")
    return RewriteIntent(
        old_author_emails=_string_list(data.get("old_author_emails"), "old_author_emails"),
        old_author_names=_string_list(data.get("old_author_names"), "old_author_names"),
        new_author_name=str(new_name) if new_name else None,
        new_author_email=str(new_email) if new_email else None,
        text_replacements=_replacements(replacements),
    )


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from YAML file.

    Raises:
        ConfigError: If the file is not valid YAML or has malformed sections
    """
    if config_path is None:
        # Look for config in standard locations
        search_paths = [
            Path.cwd() / "config.yaml",
            Path.home() / ".config" / "repo-relocator" / "config.yaml",
            Path("/etc/repo-relocator/config.yaml"),
        ]
        for path in search_paths:
            if path.exists():
                config_path = path
                break

    data: dict = {}
    if config_path is not None and config_path.exists():
        try:
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse {config_path} as YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")

    rewrite_data = data.get("rewrite") or {}
    if not isinstance(rewrite_data, dict):
        raise ConfigError("rewrite must be a mapping")

    token = expand_env_var(str(data.get("github_token") or ""))
    if not token or token.startswith("${"):
        token = os.environ.get(TOKEN_ENV_VAR, "")

    target_owner = data.get("target_owner")

    return Config(
        mode=str(data.get("mode") or ""),
        github_username=str(data.get("github_username") or ""),
        github_token=token or None,
        protocol=str(data.get("protocol") or "https"),
        working_directory=expand_path(str(data.get("working_directory") or "~/repo-relocator/work")),
        create_backups=data.get("create_backups") is not False,
        target_owner=str(target_owner) if target_owner else None,
        jobs=_int(data.get("jobs"), "jobs", 8),
        api_url=str(data.get("api_url") or "https://api.github.com"),
        rewrite=_parse_rewrite(rewrite_data),
    )


def validate_config(config: Config) -> list[str]:
    """Check a loaded configuration.

    Returns:
        List of problems; empty when the configuration is usable
    """
    problems = []
    if config.mode not in MODES:
        problems.append(f"mode is required and must be one of: {', '.join(MODES)}")
    if not config.github_username:
        problems.append("github_username is required")
    if config.protocol not in PROTOCOLS:
        problems.append("protocol must be either 'https' or 'ssh', or omitted to use https")
    if config.jobs < 1:
        problems.append("jobs must be at least 1")
    return problems
