import json
import logging
from pathlib import Path

import pytest

from polysite.config import BuildConfig


def write_json(path: Path, data: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


def write_file(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


@pytest.fixture
def site(tmp_path):
    """A project tree with English (default) and German catalogs."""
    write_json(
        tmp_path / "locales" / "en.json",
        {
            "locale": {"code": "en", "name": "English"},
            "greeting": "Hello",
            "nav": {"home": "Home", "about": "About"},
            "releases": {"noChangelogMessage": "No changelog available", "notes": "Fixed *bugs*\n"},
            "rich": "Click <b>here</b><script>alert(1)</script>",
        },
    )
    write_json(
        tmp_path / "locales" / "de.json",
        {
            "locale": {"code": "de", "name": "Deutsch"},
            "greeting": "Hallo",
            "nav": {"home": "Startseite"},
            "releases": {"noChangelogMessage": "Kein Änderungsprotokoll", "notes": ""},
        },
    )
    write_file(tmp_path / "components" / "nav.html", '<nav>{{ nav.home }} | {{ nav.about }}</nav>')
    write_file(
        tmp_path / "src" / "index.html",
        '{% include "nav" %}<h1>{{ greeting }}</h1><p>{{ safe("rich") }}</p>',
    )
    write_file(tmp_path / "src" / "docs" / "notes.j2", "<base href=\"{{ data.relativeURL }}\">{{ render_markdown('releases.notes') }}")
    write_file(tmp_path / "src" / "_layout.html", "{% block body %}{% endblock %}")
    write_file(tmp_path / "src" / "css" / "site.css", "body { color: red; }\n")
    write_file(tmp_path / "src" / "robots.txt", "User-agent: *\n")

    config = BuildConfig(
        locales_dir=tmp_path / "locales",
        templates_dir=tmp_path / "src",
        components_dir=tmp_path / "components",
        output_dir=tmp_path / "dist",
    )
    return config


@pytest.fixture(autouse=True)
def reset_polysite_logger(monkeypatch):
    monkeypatch.delenv("GITHUB_ACTIONS", raising=False)
    yield
    logger = logging.getLogger("polysite")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
