"""Evaluation settings, stored as a YAML mapping."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict
import logging

import yaml


@dataclass
class Settings:
    """
    Tunables for the reference kernel and the evaluator.

    ``epsilon`` is the CSG plane tolerance, ``section_digits`` the rounding
    used to join slice segments, ``lattice_fill`` the field value assigned
    outside the solid when meshing lattices. ``trace`` attaches a
    :class:`~alumina.trace.LoggingTrace` at ``log_level``.
    """

    epsilon: float = 1e-5
    section_digits: int = 9
    lattice_fill: float = 1.0
    trace: bool = False
    log_level: str = "DEBUG"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        if not isinstance(data, dict):
            raise ValueError(f"settings must be a mapping, got {type(data)!r}")
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ValueError(f"unknown settings keys: {', '.join(unknown)}")
        values = {name: _coerce(name, type(known[name].default), value)
                  for name, value in data.items()}
        settings = cls(**values)
        settings.validate()
        return settings

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validate(self) -> None:
        if self.epsilon <= 0:
            raise ValueError("epsilon must be positive")
        if self.section_digits < 1:
            raise ValueError("section_digits must be at least 1")
        if self.lattice_fill <= 0:
            raise ValueError("lattice_fill must be positive")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"unknown log level '{self.log_level}'")

    @property
    def level(self) -> int:
        """``log_level`` as a :mod:`logging` level number."""
        return logging.getLevelName(self.log_level.upper())


def _coerce(name: str, kind: type, value: Any) -> Any:
    """Convert a raw YAML value to the type of the field it sets."""
    if kind is bool:
        if isinstance(value, bool):
            return value
        raise ValueError(f"{name} must be true or false, got {value!r}")
    if kind is str:
        if isinstance(value, str):
            return value
        raise ValueError(f"{name} must be a string, got {value!r}")
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        return kind(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be {kind.__name__}, got {value!r}") from exc


def load_settings(path: Path | str) -> Settings:
    """Read settings from a YAML file; a missing file gives the defaults."""
    settings_path = Path(path)
    if not settings_path.exists():
        return Settings()
    with settings_path.open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    return Settings.from_dict(data)


def save_settings(settings: Settings, path: Path | str) -> None:
    settings_path = Path(path)
    settings_path.parent.mkdir(parents=True, exist_ok=True)
    with settings_path.open("w", encoding="utf-8") as fp:
        yaml.safe_dump(settings.to_dict(), fp, sort_keys=False)
