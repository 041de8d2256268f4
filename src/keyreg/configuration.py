"""Catalog schema and loader for keyreg."""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from keyreg.errors import CatalogError


class MatchingConfig(BaseModel):
    """Pattern matching policy applied to the registry."""

    case_sensitive: bool = Field(
        True, description="Compare names and wildcard prefixes case-sensitively."
    )


class SelectionConfig(BaseModel):
    """Selections applied after the catalog items are registered."""

    model_config = ConfigDict(validate_assignment=True)

    active: str | None = Field(
        default=None, description="Name made active in the single selection."
    )
    enabled: list[str] = Field(
        default_factory=list,
        description="Names or wildcard patterns enabled in the multi selection.",
    )

    @field_validator("active", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CatalogConfig(BaseModel):
    """Fully validated catalog consumed by :func:`keyreg.catalog.build_catalog`."""

    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    items: dict[str, Any] = Field(default_factory=dict)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)


def _read_yaml_resource(name: str = "default") -> dict[str, Any]:
    resource_path = resources.files("keyreg.configs").joinpath(f"{name}.yaml")
    if not resource_path.is_file():  # pragma: no cover - packaging error
        raise CatalogError(f"Missing packaged catalog '{name}'")
    return _parse_yaml(resource_path.read_text(encoding="utf-8"), source=name)


def _parse_yaml(raw: str, *, source: str) -> dict[str, Any]:
    try:
        payload = yaml.safe_load(raw) or {}
    except yaml.YAMLError as exc:
        raise CatalogError(f"Invalid YAML in {source}: {exc}") from exc
    if not isinstance(payload, dict):
        raise CatalogError(f"Catalog {source} must be a mapping at the top level")
    return payload


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            base[key] = _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> CatalogConfig:
    """Load a catalog either from the packaged default or a user-provided file."""

    if config_path is not None:
        try:
            raw = config_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CatalogError(f"Cannot read catalog {config_path}: {exc}") from exc
        payload = _parse_yaml(raw, source=str(config_path))
    else:
        payload = _read_yaml_resource()
    if overrides:
        payload = _deep_merge(payload, overrides)
    try:
        return CatalogConfig.model_validate(payload)
    except ValidationError as exc:
        raise CatalogError(f"Invalid catalog: {exc}") from exc


def config_to_dict(config: CatalogConfig) -> dict[str, Any]:
    """Serialise a catalog object into built-in Python structures."""

    return json.loads(config.model_dump_json())


__all__ = [
    "CatalogConfig",
    "MatchingConfig",
    "SelectionConfig",
    "config_to_dict",
    "load_config",
]
