from __future__ import annotations

from collections.abc import Iterable

import markdown
from jinja2 import pass_context
from jinja2.runtime import Context
from markupsafe import Markup

from .catalog import LocaleCatalog
from .errors import BuildError
from .log import get_logger
from .sanitize import sanitize_fragment

logger = get_logger("helpers")

# Name under which the catalog being rendered is exposed to helpers.
CATALOG_VAR = "_catalog"

# Helpers that catalog keys of the same name must not hide from templates.
HELPER_NAMES = ("t", "safe", "render_markdown", "renderMarkdown", "contains", "not_")


def trim_end_newline(text: str) -> str:
    if text.endswith("\n"):
        return text[:-1]
    return text


def translate(catalog: LocaleCatalog, key: str) -> str:
    """Look up a translation, falling back to the key itself."""
    value = catalog.lookup(key)
    if value is None or isinstance(value, (dict, list)):
        return key
    return str(value)


def markdown_to_html(text: str) -> str:
    md = markdown.Markdown(extensions=["fenced_code", "tables"])
    return md.convert(text)


def contains(values: object, value: object) -> bool:
    items = [item.strip() for item in str(values if values is not None else "").split(",")]
    return str(value) in items


def negate(value: object) -> bool:
    return not value


def current_catalog(context: Context) -> LocaleCatalog:
    catalog = context.get(CATALOG_VAR)
    if not isinstance(catalog, LocaleCatalog):
        raise BuildError("Translation helpers can only be used while rendering a locale.")
    return catalog


class RenderHelpers:
    """Template helpers bound to the build's sanitizer and placeholder settings."""

    def __init__(self, safe_tags: Iterable[str], safe_attributes: Iterable[str], placeholder_key: str) -> None:
        self.safe_tags = list(safe_tags)
        self.safe_attributes = list(safe_attributes)
        self.placeholder_key = placeholder_key

    def translate(self, catalog: LocaleCatalog, key: str) -> str:
        return translate(catalog, key)

    def safe(self, catalog: LocaleCatalog, key: str) -> Markup:
        text = translate(catalog, key)
        return Markup(sanitize_fragment(text, self.safe_tags, self.safe_attributes))

    def render_markdown(self, catalog: LocaleCatalog, key: str) -> Markup:
        value = catalog.lookup(key)
        if value is None or value == "":
            # Read straight from the catalog data, not through translate().
            placeholder = catalog.lookup(self.placeholder_key)
            if placeholder is None or placeholder == "":
                logger.warning("Placeholder %s is missing from %s", self.placeholder_key, catalog.code)
                return Markup("<p><em></em></p>")
            text = f"*{placeholder}*"
        else:
            text = trim_end_newline(str(value))
        return Markup(markdown_to_html(text))

    def bind(self, method):
        @pass_context
        def helper(context: Context, key: str):
            return method(current_catalog(context), key)

        helper.__name__ = method.__name__
        return helper

    def globals(self) -> dict:
        return {
            "t": self.bind(self.translate),
            "safe": self.bind(self.safe),
            "render_markdown": self.bind(self.render_markdown),
            "renderMarkdown": self.bind(self.render_markdown),
            "contains": contains,
            "not_": negate,
        }

    def filters(self) -> dict:
        return {
            "t": self.bind(self.translate),
            "safe_html": self.bind(self.safe),
            "markdown": self.bind(self.render_markdown),
            "contains": contains,
            "not": negate,
        }
