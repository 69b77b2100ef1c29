from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Optional

from jinja2 import (
    ChainableUndefined,
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    Template,
    TemplateError,
    TemplateSyntaxError,
)

from .catalog import LocaleCatalog
from .config import BuildConfig
from .errors import BuildError, TemplateCompileError
from .helpers import CATALOG_VAR, HELPER_NAMES, RenderHelpers
from .log import get_logger
from .utils import write_text

logger = get_logger("render")

OUTPUT_SUFFIX = ".html"
EXCLUDE_PREFIX = "_"


@dataclass(frozen=True)
class TemplateSource:
    path: Path
    relative: PurePosixPath

    @property
    def name(self) -> str:
        return self.relative.as_posix()


def load_components(components_dir: Path, extensions: Iterable[str]) -> dict[str, str]:
    if not components_dir.is_dir():
        logger.debug("No components directory at %s", components_dir)
        return {}
    suffixes = {ext.lower() for ext in extensions}
    components = {}
    for path in sorted(components_dir.iterdir()):
        if path.is_file() and path.suffix.lower() in suffixes:
            components[path.stem] = path.read_text(encoding="utf-8")
            logger.debug("Registered component: %s", path.stem)
    return components


def create_environment(config: BuildConfig, components: Mapping[str, str]) -> Environment:
    env = Environment(
        loader=ChoiceLoader(
            [
                DictLoader(dict(components)),
                FileSystemLoader(str(config.templates_dir)),
            ]
        ),
        autoescape=True,
        undefined=ChainableUndefined,
        keep_trailing_newline=True,
    )
    helpers = RenderHelpers(config.safe_tags, config.safe_attributes, config.placeholder_key)
    env.globals.update(helpers.globals())
    env.filters.update(helpers.filters())
    return env


def discover_templates(templates_dir: Path, extensions: Iterable[str]) -> list[TemplateSource]:
    suffixes = {ext.lower() for ext in extensions}
    sources = []
    for path in templates_dir.rglob("*"):
        if not path.is_file() or path.suffix.lower() not in suffixes:
            continue
        if path.name.startswith(EXCLUDE_PREFIX):
            continue
        relative = PurePosixPath(path.relative_to(templates_dir).as_posix())
        sources.append(TemplateSource(path, relative))
    return sorted(sources, key=lambda source: source.name)


def compile_template(env: Environment, source: TemplateSource) -> Template:
    try:
        return env.get_template(source.name)
    except TemplateSyntaxError as exc:
        raise TemplateCompileError(f"Failed to compile {source.name} (line {exc.lineno}): {exc.message}") from exc


def output_relative(relative: PurePosixPath, extensions: Iterable[str]) -> PurePosixPath:
    if relative.suffix.lower() in {ext.lower() for ext in extensions}:
        return relative.with_suffix(OUTPUT_SUFFIX)
    return relative


def locale_output_path(output_dir: Path, relative: PurePosixPath, locale: str) -> Path:
    return output_dir / locale / Path(*relative.parts)


def default_output_path(output_dir: Path, relative: PurePosixPath) -> Path:
    return output_dir / Path(*relative.parts)


def relative_url(relative: PurePosixPath) -> str:
    parent = relative.parent.as_posix()
    if parent == ".":
        return ""
    return f"{parent}/"


def build_context(
    catalog: LocaleCatalog, index: Mapping[str, dict], url: str, helpers: Optional[Mapping[str, object]] = None
) -> dict:
    context = copy.deepcopy(catalog.data)
    data = context.get("data")
    if not isinstance(data, dict):
        data = context["data"] = {}
    data["locales"] = copy.deepcopy(dict(index))
    data["relativeURL"] = url
    data["locale"] = catalog.code
    context[CATALOG_VAR] = catalog
    if helpers:
        # Helpers win over catalog keys of the same name.
        context.update(helpers)
    return context


def render_template_for_locales(
    template: Template,
    source: TemplateSource,
    catalogs: Mapping[str, LocaleCatalog],
    index: Mapping[str, dict],
    config: BuildConfig,
) -> list[Path]:
    relative = output_relative(source.relative, config.template_extensions)
    url = relative_url(source.relative)
    env_globals = template.environment.globals
    helpers = {name: env_globals[name] for name in HELPER_NAMES if name in env_globals}
    written = []
    for locale in sorted(catalogs):
        context = build_context(catalogs[locale], index, url, helpers)
        try:
            html_content = template.render(context)
        except TemplateError as exc:
            raise BuildError(f"Failed to render {source.name} (locale: {locale}): {exc}") from exc

        output_path = locale_output_path(config.output_dir, relative, locale)
        write_text(output_path, html_content)
        written.append(output_path)
        if locale == config.default_locale:
            output_path = default_output_path(config.output_dir, relative)
            write_text(output_path, html_content)
            written.append(output_path)
        logger.info("Built: %s (locale: %s)", output_path, locale)
    return written


def render_all(
    env: Environment,
    catalogs: Mapping[str, LocaleCatalog],
    index: Mapping[str, dict],
    config: BuildConfig,
) -> list[Path]:
    written = []
    for source in discover_templates(config.templates_dir, config.template_extensions):
        template = compile_template(env, source)
        written.extend(render_template_for_locales(template, source, catalogs, index, config))
    return written
