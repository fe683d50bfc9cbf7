"""YAML config loader — parses, interpolates env vars, validates, and emits observer events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from case_eval.config.domain.config import RunConfig
from case_eval.config.domain.observer import ConfigObserver
from case_eval.config.infrastructure.env_interpolation import find_missing_vars, interpolate
from case_eval.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)


class YamlConfigLoader:
    """Loads, interpolates, validates, and returns a RunConfig from a YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> RunConfig:
        """
        Load a RunConfig; a relative ``dataset`` path is resolved against the
        config file's directory.

        Raises:
            ConfigLoadError: if the file is missing or is not valid YAML.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset (all collected first).
            ConfigValidationError: if the schema is violated.
        """
        raw = _parse_yaml(path=path)
        missing = find_missing_vars(raw)
        if missing:
            raise MissingEnvVarsError(missing)
        cfg = _build_config(resolved=interpolate(raw))
        if not cfg.dataset.is_absolute():
            cfg = cfg.model_copy(update={"dataset": path.parent / cfg.dataset})

        if cfg.execution.max_concurrency is None:
            self._observer.config_unbounded_concurrency_warning(path=str(path))
        self._observer.config_loaded(
            path=str(path), name=cfg.name, dataset=str(cfg.dataset)
        )
        return cfg


def _parse_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            return yaml.safe_load(fh)
    except FileNotFoundError as exc:
        raise ConfigLoadError(path=path) from exc
    except yaml.YAMLError as exc:
        raise ConfigLoadError(path=path, reason=f"invalid YAML ({exc})") from exc


def _build_config(resolved: Any) -> RunConfig:
    try:
        return RunConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc
