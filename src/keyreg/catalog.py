"""Helpers for turning a validated catalog into live registries."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from keyreg.configuration import CatalogConfig
from keyreg.errors import CatalogError, NotFoundError
from keyreg.registry import KeyedRegistry
from keyreg.selection import MultiSelection, SingleSelection

LOGGER = logging.getLogger(__name__)


@dataclass
class Catalog:
    registry: KeyedRegistry[Any]
    single: SingleSelection[Any]
    multi: MultiSelection[Any]


def build_registry(
    config: CatalogConfig, *, logger: logging.Logger | None = None
) -> KeyedRegistry[Any]:
    """Create a registry with the configured case policy and all catalog items."""

    logger = logger or LOGGER
    registry: KeyedRegistry[Any] = KeyedRegistry(
        case_sensitive=config.matching.case_sensitive
    )
    registry.register_all(config.items)
    logger.info(
        "Loaded %s item(s) (case_sensitive=%s)",
        len(registry),
        registry.case_sensitive,
    )
    return registry


def build_catalog(
    config: CatalogConfig, *, logger: logging.Logger | None = None
) -> Catalog:
    """Build the registry and both overlays, applying configured selections."""

    logger = logger or LOGGER
    registry = build_registry(config, logger=logger)
    single: SingleSelection[Any] = SingleSelection(registry)
    multi: MultiSelection[Any] = MultiSelection(registry)
    try:
        single.set_enabled_item(config.selection.active)
        multi.set_enabled_items(*config.selection.enabled)
    except NotFoundError as exc:
        raise CatalogError(f"Catalog selection failed: {exc}") from exc
    logger.debug(
        "Selections applied: active=%s enabled=%s",
        single.active_name,
        sorted(multi.get_active_item_names()),
    )
    return Catalog(registry=registry, single=single, multi=multi)


__all__ = ["Catalog", "build_catalog", "build_registry"]
