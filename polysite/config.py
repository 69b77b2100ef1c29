from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path

from .log import get_logger
from .utils import parse_bool, parse_list

try:
    import tomllib as toml
except ImportError:
    try:
        import tomli as toml
    except ImportError:  # pragma: no cover - optional dependency
        toml = None

try:
    import yaml
except ImportError:  # pragma: no cover - optional dependency
    yaml = None

logger = get_logger("config")

DEFAULT_PLACEHOLDER_KEY = "releases.noChangelogMessage"


@dataclass
class BuildConfig:
    locales_dir: Path = Path("locales")
    templates_dir: Path = Path("src")
    components_dir: Path = Path("components")
    output_dir: Path = Path("dist")
    exclude_patterns: list[str] = field(default_factory=lambda: ["**/*.html", "**/*.j2"])
    default_locale: str = "en"
    safe_tags: list[str] = field(default_factory=lambda: ["b", "i", "br", "code"])
    safe_attributes: list[str] = field(default_factory=list)
    template_extensions: list[str] = field(default_factory=lambda: [".html", ".j2"])
    placeholder_key: str = DEFAULT_PLACEHOLDER_KEY
    clean: bool = True

    @classmethod
    def from_mapping(cls, data: dict) -> "BuildConfig":
        config = cls()
        for key in ("locales_dir", "templates_dir", "components_dir", "output_dir"):
            if data.get(key) is not None:
                setattr(config, key, Path(str(data[key])))
        for key in ("exclude_patterns", "safe_tags", "safe_attributes", "template_extensions"):
            if data.get(key) is not None:
                setattr(config, key, parse_list(data[key]))
        if data.get("default_locale"):
            config.default_locale = str(data["default_locale"]).strip()
        if data.get("placeholder_key"):
            config.placeholder_key = str(data["placeholder_key"]).strip()
        if data.get("clean") is not None:
            config.clean = parse_bool(data["clean"])
        config.safe_tags = [tag.lower() for tag in config.safe_tags]
        config.safe_attributes = [attr.lower() for attr in config.safe_attributes]
        config.template_extensions = [
            ext if ext.startswith(".") else f".{ext}" for ext in config.template_extensions
        ]
        return config


def load_config(path: Path) -> dict:
    if not path.exists():
        return {}
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".toml":
        if toml is None:
            logger.error("TOML config requires tomllib (Python 3.11+) or tomli.")
            sys.exit(1)
        try:
            data = toml.loads(text)
        except Exception as exc:  # pragma: no cover - depends on parser
            logger.error("Invalid TOML in config file %s: %s", path, exc)
            sys.exit(1)
        if not isinstance(data, dict):
            logger.error("TOML config must be a mapping: %s", path)
            sys.exit(1)
        return data
    if suffix in {".yml", ".yaml"}:
        if yaml is None:
            logger.error("YAML config requires PyYAML.")
            sys.exit(1)
        try:
            data = yaml.safe_load(text)
        except Exception as exc:  # pragma: no cover - depends on parser
            logger.error("Invalid YAML in config file %s: %s", path, exc)
            sys.exit(1)
        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.error("YAML config must be a mapping: %s", path)
            sys.exit(1)
        return data
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.error("Invalid JSON in config file %s: %s", path, exc)
        sys.exit(1)
    if not isinstance(data, dict):
        logger.error("JSON config must be a mapping: %s", path)
        sys.exit(1)
    return data
