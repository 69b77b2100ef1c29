from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import toml, yaml
from .errors import CatalogError
from .log import get_logger
from .utils import write_text

logger = get_logger("catalog")

CATALOG_SUFFIXES = (".json", ".yaml", ".yml", ".toml")
MANIFEST_DIR = Path("resources") / "locales"


@dataclass
class LocaleCatalog:
    code: str
    data: dict
    source: Optional[Path] = None
    backfilled: list[str] = field(default_factory=list)

    def lookup(self, key: str) -> object:
        """Return the value at a dotted key path, or ``None`` when any segment is missing."""
        node: object = self.data
        for part in key.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return None
            node = node[part]
        return node

    @property
    def meta(self) -> dict:
        value = self.data.get("locale")
        meta = dict(value) if isinstance(value, Mapping) else {}
        meta.setdefault("code", self.code)
        meta.setdefault("name", meta["code"])
        return meta


def discover_locales(locales_dir: Path) -> list[str]:
    if not locales_dir.is_dir():
        return []
    codes = {
        path.stem
        for path in locales_dir.iterdir()
        if path.is_file() and path.suffix.lower() in CATALOG_SUFFIXES
    }
    return sorted(codes)


def find_catalog_file(locales_dir: Path, code: str) -> Optional[Path]:
    for suffix in CATALOG_SUFFIXES:
        candidate = locales_dir / f"{code}{suffix}"
        if candidate.is_file():
            return candidate
    return None


def read_catalog_file(path: Path) -> dict:
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
        if suffix == ".json":
            data = json.loads(text)
        elif suffix in {".yaml", ".yml"}:
            if yaml is None:
                raise CatalogError(f"YAML catalog requires PyYAML: {path}")
            data = yaml.safe_load(text)
            if data is None:
                data = {}
        elif suffix == ".toml":
            if toml is None:
                raise CatalogError(f"TOML catalog requires tomllib (Python 3.11+) or tomli: {path}")
            data = toml.loads(text)
        else:
            raise CatalogError(f"Unsupported catalog format: {path}")
    except CatalogError:
        raise
    except Exception as exc:
        raise CatalogError(f"Failed to load catalog {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise CatalogError(f"Catalog must be a mapping: {path}")
    return data


def merge_missing(default: Mapping, target: dict, locale: str, prefix: str = "") -> list[str]:
    """Backfill keys of ``default`` that ``target`` lacks, in place.

    Each key copied from the default is logged once as a warning and returned
    as a dotted path. Nested mappings present on both sides are walked; any
    other value already in ``target`` is kept as the translation.
    """
    backfilled = []
    for key, default_value in default.items():
        path = f"{prefix}{key}"
        if key not in target:
            logger.warning("Key %s is missing from %s", path, locale)
            target[key] = copy.deepcopy(default_value)
            backfilled.append(path)
            continue
        if not isinstance(default_value, Mapping):
            continue
        target_value = target[key]
        if isinstance(target_value, Mapping):
            if not isinstance(target_value, dict):
                target_value = target[key] = dict(target_value)
            backfilled.extend(merge_missing(default_value, target_value, locale, f"{path}."))
        else:
            logger.warning("Key %s in %s is not a group; keeping its value", path, locale)
    return backfilled


def load_catalogs(locales_dir: Path, default_locale: str) -> dict[str, LocaleCatalog]:
    default_path = find_catalog_file(locales_dir, default_locale)
    if default_path is None:
        raise CatalogError(f"Default locale catalog '{default_locale}' not found in {locales_dir}")
    default = LocaleCatalog(default_locale, read_catalog_file(default_path), default_path)

    codes = discover_locales(locales_dir)
    if default_locale not in codes:
        codes = sorted([*codes, default_locale])

    catalogs = {}
    for code in codes:
        if code == default_locale:
            catalogs[code] = default
            continue
        path = find_catalog_file(locales_dir, code)
        if path is None:
            raise CatalogError(f"Locale catalog not found: {locales_dir / code}")
        catalog = LocaleCatalog(code, read_catalog_file(path), path)
        catalog.backfilled = merge_missing(default.data, catalog.data, code)
        catalogs[code] = catalog
    logger.info("Loaded locales: %s", ", ".join(catalogs))
    return catalogs


def build_locale_index(catalogs: Mapping[str, LocaleCatalog]) -> dict[str, dict]:
    index = {}
    for code, catalog in catalogs.items():
        index[code] = catalog.meta
    return index


def manifest_payload(catalog: LocaleCatalog, index: Mapping[str, dict]) -> dict:
    payload = copy.deepcopy(catalog.data)
    data = payload.get("data")
    if not isinstance(data, dict):
        data = payload["data"] = {}
    data["locales"] = copy.deepcopy(dict(index))
    return payload


def write_locale_manifests(
    catalogs: Mapping[str, LocaleCatalog], index: Mapping[str, dict], output_dir: Path
) -> list[Path]:
    target_dir = output_dir / MANIFEST_DIR
    written = []
    for code, catalog in catalogs.items():
        path = target_dir / f"{code}.json"
        raw = json.dumps(manifest_payload(catalog, index), indent="\t", ensure_ascii=False)
        write_text(path, raw)
        written.append(path)
        logger.debug("Wrote locale manifest: %s", path)
    return written
