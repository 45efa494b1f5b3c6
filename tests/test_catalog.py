import json

import pytest
from pydantic import ValidationError

from pcbuilder.data import Catalog, CatalogError, default_catalog, load_catalog
from pcbuilder.engine import ConfigurationEngine


def _raw_catalog() -> dict:
    return default_catalog().model_dump()


def test_default_catalog_matches_reference_tables():
    catalog = default_catalog()

    assert [u.id for u in catalog.use_cases] == ["workstation", "gaming", "office"]
    assert [c.id for c in catalog.categories] == ["entry", "mid", "high"]
    assert [(c.min, c.max) for c in catalog.categories] == [(500, 800), (800, 1500), (1500, 5000)]
    assert [e.key for e in catalog.extras] == ["white", "rgb"]
    assert catalog.memory_sizes == ["Auto", "16GB", "32GB", "64GB"]
    assert len(catalog.parts) == 6


def test_empty_category_table_fails_fast():
    raw = _raw_catalog()
    raw["categories"] = []
    with pytest.raises(CatalogError):
        Catalog.build(**raw)


def test_non_contiguous_categories_are_rejected():
    raw = _raw_catalog()
    raw["categories"][1]["min"] = 900
    with pytest.raises(CatalogError, match="contiguous"):
        Catalog.build(**raw)


def test_categories_must_start_at_budget_minimum():
    raw = _raw_catalog()
    raw["categories"][0]["min"] = 700
    with pytest.raises(CatalogError, match="cover"):
        Catalog.build(**raw)


def test_categories_must_reach_budget_maximum():
    raw = _raw_catalog()
    raw["categories"][2]["max"] = 3000
    with pytest.raises(CatalogError, match="cover"):
        Catalog.build(**raw)


def test_json_catalog_with_uncovered_budgets_fails_to_load(tmp_path):
    raw = _raw_catalog()
    raw["categories"][0]["min"] = 700
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(raw, ensure_ascii=False), encoding="utf-8")

    with pytest.raises(CatalogError, match="cover"):
        load_catalog(path)


def test_inverted_category_interval_is_rejected():
    raw = _raw_catalog()
    raw["categories"][0]["max"] = 500
    with pytest.raises(CatalogError):
        Catalog.build(**raw)


def test_duplicate_category_ids_are_rejected():
    raw = _raw_catalog()
    raw["categories"][2]["id"] = "mid"
    with pytest.raises(CatalogError, match="duplicate"):
        Catalog.build(**raw)


def test_missing_fallback_category_is_rejected():
    raw = _raw_catalog()
    raw["fallback_category_id"] = "ultra"
    with pytest.raises(CatalogError, match="fallback"):
        Catalog.build(**raw)


def test_non_positive_part_price_is_rejected():
    raw = _raw_catalog()
    raw["parts"][0]["unit_price"] = 0
    with pytest.raises(CatalogError):
        Catalog.build(**raw)


def test_unknown_use_case_id_is_rejected():
    raw = _raw_catalog()
    raw["use_cases"][0]["id"] = "server"
    with pytest.raises(CatalogError):
        Catalog.build(**raw)


def test_default_budget_outside_domain_is_rejected():
    raw = _raw_catalog()
    raw["default_budget"] = 9000
    with pytest.raises(CatalogError):
        Catalog.build(**raw)


def test_catalog_loads_from_json_file(tmp_path):
    raw = _raw_catalog()
    raw["parts"] = raw["parts"][:2]
    raw["default_budget"] = 700
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(raw, ensure_ascii=False), encoding="utf-8")

    catalog = load_catalog(path)
    engine = ConfigurationEngine(catalog)

    assert engine.budget == 700
    assert engine.active_category().id == "entry"
    assert engine.total_cost() == 279 + 499


def test_catalog_file_errors(tmp_path):
    with pytest.raises(CatalogError, match="missing"):
        load_catalog(tmp_path / "nope.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError, match="JSON"):
        load_catalog(broken)

    listed = tmp_path / "list.json"
    listed.write_text("[]", encoding="utf-8")
    with pytest.raises(CatalogError):
        load_catalog(listed)


def test_catalog_is_read_only():
    catalog = default_catalog()
    with pytest.raises(ValidationError):
        catalog.default_budget = 900
