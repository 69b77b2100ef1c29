from polysite.static import copy_static_files, is_excluded

PATTERNS = ["**/*.html", "**/*.j2"]


def test_is_excluded_matches_nested_and_top_level():
    assert is_excluded("index.html", PATTERNS)
    assert is_excluded("docs/deep/page.j2", PATTERNS)
    assert not is_excluded("css/site.css", PATTERNS)
    assert not is_excluded("html/readme.txt", PATTERNS)


def test_copies_non_template_files_verbatim(site):
    image = site.templates_dir / "img" / "logo.png"
    image.parent.mkdir(parents=True)
    image.write_bytes(b"\x89PNG\r\n\x00binary")

    copied = copy_static_files(site.templates_dir, site.output_dir, site.exclude_patterns)

    assert copied == ["css/site.css", "img/logo.png", "robots.txt"]
    assert (site.output_dir / "img" / "logo.png").read_bytes() == b"\x89PNG\r\n\x00binary"
    assert (site.output_dir / "css" / "site.css").read_text(encoding="utf-8") == "body { color: red; }\n"
    assert not (site.output_dir / "index.html").exists()
    assert not (site.output_dir / "_layout.html").exists()


def test_missing_source_copies_nothing(tmp_path):
    assert copy_static_files(tmp_path / "missing", tmp_path / "out", PATTERNS) == []
