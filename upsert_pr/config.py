"""Configuration loading from environment and optional YAML.

Inside a GitHub Actions step every action input arrives as an ``INPUT_*``
environment variable and the run context as ``GITHUB_*`` variables. For
local runs the same values can be put in a YAML file (sections ``inputs``,
``github`` and ``logging``); ``${VAR}`` references in it are expanded from
the environment. Never commit real tokens to that file.
"""

import json
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TEMPLATE_FILE = ".github/pull_request_template.md"


class ConfigError(Exception):
    """Raised when a required input is missing or an input is malformed."""

    pass


def _parse_template_vars(name: str, raw: str) -> dict[str, str]:
    """Parse a JSON object of template variables, keeping key order."""
    if not raw or not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"{name} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{name} must be a JSON object")
    for key, value in data.items():
        if not isinstance(value, str):
            raise ConfigError(f"{name}: value for {key!r} must be a string")
    return data


class ActionInputs(BaseSettings):
    """Action inputs (env: INPUT_<NAME>)."""

    model_config = SettingsConfigDict(env_prefix="INPUT_", extra="ignore")

    pr_source_branch: str = Field(default="", description="Head branch, 'branch' or 'owner:branch'")
    pr_destination_branch: str = Field(default="", description="Base branch")
    github_token: str = Field(default="", description="Token for the GitHub API")

    create_pr_title: str = Field(default="", description="Title; required when creating")
    create_pr_draft: bool = Field(default=False, description="Open the PR as draft")
    create_pr_body: str = Field(default="", description="Literal body; wins over the template file")
    create_pr_template_file: str = Field(default=DEFAULT_TEMPLATE_FILE, description="Body template path")
    create_pr_body_template_vars: str = Field(default="", description="JSON object of template variables")
    create_pr_reviewers: str = Field(default="", description="CSV of reviewer logins")

    update_pr_title: str = Field(default="", description="New title; existing title when empty")
    update_pr_body: str = Field(default="", description="New body; existing body when empty")
    update_pr_body_template_vars: str = Field(default="", description="JSON object of template variables")
    update_pr_reviewers: str = Field(default="", description="CSV of reviewers to add")
    update_pr_rerequest_reviewers: str = Field(
        default="", description="CSV of reviewers to request again even if they reviewed"
    )

    @field_validator("create_pr_draft", mode="before")
    @classmethod
    def _parse_draft(cls, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        return str(value or "").strip().lower() == "true"

    @field_validator("create_pr_template_file", mode="before")
    @classmethod
    def _default_template_file(cls, value: Any) -> str:
        # Actions passes unset inputs as empty strings
        return value or DEFAULT_TEMPLATE_FILE

    def require(self, *names: str) -> None:
        """Raise ConfigError for the first named input that is empty."""
        for name in names:
            if not getattr(self, name):
                raise ConfigError(f"{name} is required")

    @property
    def template_file_overridden(self) -> bool:
        return self.create_pr_template_file != DEFAULT_TEMPLATE_FILE

    @property
    def create_template_vars(self) -> dict[str, str]:
        return _parse_template_vars("create_pr_body_template_vars", self.create_pr_body_template_vars)

    @property
    def update_template_vars(self) -> dict[str, str]:
        return _parse_template_vars("update_pr_body_template_vars", self.update_pr_body_template_vars)


class GitHubContext(BaseSettings):
    """Run context provided by the Actions runner (env: GITHUB_*)."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    repository: str = Field(default="", description="Current repository as owner/repo")
    api_url: str = Field(default="https://api.github.com", description="API base URL")
    output: str | None = Field(default=None, description="Path of the step outputs file")

    def owner_and_repo(self) -> tuple[str, str]:
        """Split repository into (owner, repo)."""
        owner, sep, repo = self.repository.partition("/")
        if not sep or not owner or not repo or "/" in repo:
            raise ConfigError(f"GITHUB_REPOSITORY must be owner/repo, got {self.repository!r}")
        return owner, repo


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root config: inputs, run context and logging."""

    model_config = SettingsConfigDict(extra="ignore")

    inputs: ActionInputs = Field(default_factory=ActionInputs)
    github: GitHubContext = Field(default_factory=GitHubContext)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _substitute_env(value: Any, env: dict[str, str]) -> Any:
    """Replace ${VAR} and $VAR strings with values from env."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            return env.get(value[2:-1].strip(), value)
        if value.startswith("$") and not value.startswith("${"):
            return env.get(value[1:].strip(), value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v, env) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v, env) for v in value]
    return value


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from the environment and, if given, a YAML file.

    Values from the YAML file take precedence over the environment.
    """
    if config_path is None or not config_path.is_file():
        return AppConfig()

    try:
        raw = yaml.safe_load(config_path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing YAML config {config_path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"YAML config {config_path} must be a mapping")
    raw = _substitute_env(raw, dict(os.environ))

    return AppConfig(
        inputs=ActionInputs(**(raw.get("inputs") or {})),
        github=GitHubContext(**(raw.get("github") or {})),
        logging=LoggingConfig(**(raw.get("logging") or {})),
    )
