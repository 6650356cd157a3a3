"""Configuration loader for the sync tool."""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import yaml
from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from knowledge_sync.errors import ConfigurationError


ENV_PREFIX = "KNOWLEDGE_SYNC_"

# environment variable suffix -> SyncConfig field
ENV_FIELDS = {
    "REPO": "repo_path",
    "BRANCH": "required_branch",
    "REMOTE": "remote_name",
    "GIT": "git_executable",
    "TIMEOUT": "command_timeout",
}

# dotted YAML key -> SyncConfig field
YAML_FIELDS = {
    "repository.path": "repo_path",
    "repository.required_branch": "required_branch",
    "repository.remote": "remote_name",
    "git.executable": "git_executable",
    "git.timeout": "command_timeout",
}


class SyncConfig(BaseModel):
    """Settings for one run. Built once and passed to every stage."""
    model_config = ConfigDict(frozen=True)

    repo_path: Path = Field(default_factory=Path.cwd)
    required_branch: str = "main"
    remote_name: str = "origin"
    git_executable: str = "git"
    command_timeout: int = Field(default=120, gt=0)


def _substitute_env_vars(obj: Any, environ: Mapping[str, str]) -> Any:
    """Recursively substitute ${ENV_VAR} patterns with environment variables."""
    if isinstance(obj, dict):
        return {k: _substitute_env_vars(v, environ) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_substitute_env_vars(item, environ) for item in obj]
    elif isinstance(obj, str):
        if obj.startswith("${") and obj.endswith("}"):
            var_name = obj[2:-1]
            return environ.get(var_name, obj)
        return obj
    return obj


def _get(data: Dict[str, Any], key: str, default: Any = None) -> Any:
    """Get a value by dot-separated key (e.g. "repository.path")."""
    value: Any = data
    for k in key.split("."):
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default
    return value


def _read_yaml(config_path: str, environ: Mapping[str, str]) -> Dict[str, Any]:
    path = Path(config_path).expanduser()
    if not path.is_file():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid configuration file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")

    data = _substitute_env_vars(data, environ)
    values = {}
    for key, field in YAML_FIELDS.items():
        value = _get(data, key)
        if value is not None:
            values[field] = value
    return values


def load_config(
    config_path: Optional[str] = None,
    env_file: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> SyncConfig:
    """
    Build the run configuration.

    Precedence, lowest first: defaults, YAML file, environment (an env file
    is layered under the process environment), keyword overrides.

    Args:
        config_path: Optional YAML file
        env_file: Optional dotenv file
        environ: Environment mapping (defaults to os.environ)
        **overrides: Field values from the command line; None is ignored

    Returns:
        Frozen SyncConfig
    """
    env: Dict[str, str] = {}
    if env_file:
        if not Path(env_file).expanduser().is_file():
            raise ConfigurationError(f"Env file not found: {env_file}")
        env.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    env.update(os.environ if environ is None else environ)

    values: Dict[str, Any] = {}
    if config_path:
        values.update(_read_yaml(config_path, env))

    for suffix, field in ENV_FIELDS.items():
        value = env.get(ENV_PREFIX + suffix)
        if value:
            values[field] = value

    values.update({k: v for k, v in overrides.items() if v is not None})

    if "repo_path" in values:
        values["repo_path"] = Path(values["repo_path"]).expanduser()

    try:
        return SyncConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
