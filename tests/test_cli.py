import json
import logging

from polysite.cli import build_site, main

from conftest import write_file, write_json


def test_build_site_end_to_end(site, tmp_path, caplog):
    stale = site.output_dir / "stale.html"
    write_file(stale, "old")
    with caplog.at_level(logging.INFO, logger="polysite"):
        build_site(site, project_root=tmp_path)

    out = site.output_dir
    assert not stale.exists()
    assert (out / "css" / "site.css").exists()
    assert (out / "robots.txt").exists()
    assert json.loads((out / "resources" / "locales" / "en.json").read_text(encoding="utf-8"))["data"]["locales"]
    for path in ("index.html", "en/index.html", "de/index.html", "docs/notes.html"):
        assert (out / path).exists(), path
    assert (out / "index.html").read_bytes() == (out / "en" / "index.html").read_bytes()

    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert sorted(warnings) == ["Key nav.about is missing from de", "Key rich is missing from de"]
    assert "Build complete!" in [r.getMessage() for r in caplog.records]


def test_build_without_clean_keeps_existing_files(site, tmp_path):
    site.clean = False
    keep = site.output_dir / "keep.txt"
    write_file(keep, "x")
    build_site(site, project_root=tmp_path)
    assert keep.exists()


def test_main_returns_zero_on_success(site, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    write_file(tmp_path / "site.json", json.dumps({"safe_tags": ["b"]}))
    code = main(["--config", "site.json", "--templates", "src", "--output", "public", "--log-file", "logs/build.log"])
    assert code == 0
    assert (tmp_path / "public" / "de" / "index.html").exists()
    assert "Build complete!" in (tmp_path / "logs" / "build.log").read_text(encoding="utf-8")


def test_main_fails_without_default_catalog(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    write_json(tmp_path / "locales" / "de.json", {"greeting": "Hallo"})
    (tmp_path / "src").mkdir()
    code = main(["--log-file", "build.log"])
    assert code == 1
    log_text = (tmp_path / "build.log").read_text(encoding="utf-8")
    assert "Build failed: Default locale catalog 'en' not found" in log_text
    assert "Traceback" in log_text
    assert "[ERROR] Build failed" in capsys.readouterr().out
