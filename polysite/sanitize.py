from __future__ import annotations

from collections.abc import Iterable

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

# NavigableString subclasses (comments, doctypes, CDATA, ...) that are not plain text.
TEXT_TYPES = (NavigableString,)

# Escapes only markup characters and writes void elements as <br>.
FORMATTER = HTMLFormatter(entity_substitution=EntitySubstitution.substitute_xml, void_element_close_prefix=None)


def is_text(node: object) -> bool:
    return type(node) in TEXT_TYPES


def sanitize_node(node: Tag, tags: frozenset[str], attributes: frozenset[str]) -> None:
    for child in list(node.children):
        if isinstance(child, Tag):
            if child.name.lower() not in tags:
                child.decompose()
                continue
            child.attrs = {name: value for name, value in child.attrs.items() if name.lower() in attributes}
            sanitize_node(child, tags, attributes)
        elif not is_text(child):
            child.extract()


def sanitize_fragment(html_text: str, tags: Iterable[str], attributes: Iterable[str] = ()) -> str:
    """Filter an HTML fragment against tag and attribute allowlists.

    A tag outside the allowlist is removed together with everything inside it.
    Allowed tags keep only allowlisted attributes. Text is left untouched;
    comments and other non-text nodes are removed.
    """
    if not html_text:
        return ""
    allowed_tags = frozenset(tag.lower() for tag in tags)
    allowed_attributes = frozenset(attr.lower() for attr in attributes)
    soup = BeautifulSoup(html_text, "html.parser")
    sanitize_node(soup, allowed_tags, allowed_attributes)
    return soup.decode(formatter=FORMATTER)
