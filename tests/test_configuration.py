from __future__ import annotations

from pathlib import Path

import pytest

from keyreg.configuration import config_to_dict, load_config
from keyreg.errors import CatalogError


def test_load_packaged_default() -> None:
    cfg = load_config()
    assert cfg.matching.case_sensitive is True
    assert "deploy staging" in cfg.items
    assert cfg.selection.active == "status"
    assert cfg.selection.enabled == ["deploy*"]


def test_load_config_overrides() -> None:
    cfg = load_config(
        overrides={"matching": {"case_sensitive": False}, "selection": {"active": ""}}
    )
    assert cfg.matching.case_sensitive is False
    assert cfg.selection.active is None
    assert cfg.selection.enabled == ["deploy*"]


def test_load_config_from_file(tmp_path: Path) -> None:
    config_path = tmp_path / "catalog.yaml"
    config_path.write_text(
        """
matching:
  case_sensitive: false
items:
  alpha: 1
  beta:
    nested: true
""",
        encoding="utf-8",
    )
    cfg = load_config(config_path=config_path)
    assert cfg.items == {"alpha": 1, "beta": {"nested": True}}
    assert cfg.selection.enabled == []
    assert config_to_dict(cfg)["matching"] == {"case_sensitive": False}


def test_load_config_rejects_bad_input(tmp_path: Path) -> None:
    broken = tmp_path / "broken.yaml"
    broken.write_text("items: [unclosed", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_config(config_path=broken)

    wrong_shape = tmp_path / "list.yaml"
    wrong_shape.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_config(config_path=wrong_shape)

    wrong_type = tmp_path / "type.yaml"
    wrong_type.write_text("items: not-a-mapping\n", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_config(config_path=wrong_type)

    with pytest.raises(CatalogError):
        load_config(config_path=tmp_path / "missing.yaml")
