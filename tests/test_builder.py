import json
import pathlib

import pytest

from babe.builder import build_site, create_context, run
from babe.errors import LayoutNotFoundError, PartialNotFoundError


def _write(base: pathlib.Path, relative: str, text: str) -> pathlib.Path:
    path = base.joinpath(*relative.split("/"))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def _read(base: pathlib.Path, relative: str) -> str:
    return base.joinpath(*relative.split("/")).read_text(encoding="utf-8")


@pytest.fixture
def site(tmp_path):
    _write(
        tmp_path,
        "babe.json",
        json.dumps(
            {
                "static": {"site": "My Site"},
                "dynamic": {
                    "posts": {"from": "blog", "sortBy": "date", "order": "desc"},
                    "archive": {"from": "blog", "sortBy": "date", "order": "desc", "groupBy": "date|year"},
                },
            }
        ),
    )
    _write(
        tmp_path,
        "_layouts/default.hbs",
        "<main>{{title}}|{{{entry}}}|{{> footer}}{{#if is_blog_first}}FIRST{{/if}}</main>",
    )
    _write(tmp_path, "_layouts/plain.hbs", "<div>{{title}} {{time_to_read}}</div>")
    _write(tmp_path, "_partials/footer.hbs", "<footer>{{site}}{{> copyright}}</footer>")
    _write(tmp_path, "_partials/copyright.hbs", "(c)")
    _write(tmp_path, "blog/first.md", "---\ntitle: First\ndate: 2020-01-01\n---\nHello")
    _write(tmp_path, "blog/second.md", "---\ntitle: Second\ndate: 2021-01-02\nlayout: plain\n---\nWorld")
    _write(tmp_path, "feed.xml.hbs", "{{#each posts}}{{title}};{{/each}}")
    _write(
        tmp_path,
        "archive.html.hbs",
        "{{#each archive}}{{group}}:{{#each items}}{{title}},{{/each}};{{/each}}",
    )
    _write(tmp_path, "css/style.css", "body {}")
    _write(tmp_path, ".hidden", "secret")
    return tmp_path


def test_build_renders_items_pages_and_assets(site):
    written = run(site)

    assert _read(site, "public/blog/first/index.html") == "<main>First|<p>Hello</p>|<footer>My Site(c)</footer>FIRST</main>"
    assert _read(site, "public/blog/second/index.html") == "<div>Second 1</div>"
    assert _read(site, "public/feed.xml") == "Second;First;"
    assert _read(site, "public/archive.html") == "2021:Second,;2020:First,;"
    assert _read(site, "public/css/style.css") == "body {}"
    assert not (site / "public" / ".hidden").exists()
    assert not (site / "public" / "babe.json").exists()
    assert not (site / "public" / "_layouts").exists()
    assert not (site / "public" / "_partials").exists()
    assert site / "public" / "feed.xml" in written
    assert len(written) == 5


def test_rebuild_is_idempotent_and_ignores_previous_output(site):
    run(site)
    before = {path: path.read_bytes() for path in (site / "public").rglob("*") if path.is_file()}

    run(site)
    after = {path: path.read_bytes() for path in (site / "public").rglob("*") if path.is_file()}

    assert before == after
    assert not (site / "public" / "public").exists()


def test_clean_removes_stale_output(site):
    _write(site, "public/stale.html", "old")

    run(site, clean=True)

    assert not (site / "public" / "stale.html").exists()
    assert (site / "public" / "feed.xml").exists()


def test_global_data_overrides_item_fields(site):
    _write(site, "babe.json", json.dumps({"static": {"site": "My Site", "title": "Global"}}))
    _write(site, "archive.html.hbs", "static")
    _write(site, "feed.xml.hbs", "static")

    run(site)

    assert _read(site, "public/blog/second/index.html") == "<div>Global 1</div>"


def test_missing_layout_aborts_build(site):
    _write(site, "blog/third.md", "---\nlayout: gallery\n---\nPics")

    with pytest.raises(LayoutNotFoundError) as excinfo:
        run(site)

    assert "gallery" in str(excinfo.value)
    assert "/blog/third.md" in str(excinfo.value)


def test_missing_partial_aborts_build(site):
    _write(site, "feed.xml.hbs", "{{> missing}}")

    with pytest.raises(PartialNotFoundError):
        run(site)


def test_context_is_built_fresh_per_run(site):
    first = create_context(site, workers=2)
    _write(site, "babe.json", json.dumps({"static": {"site": "Renamed"}}))
    second = create_context(site, workers=2)

    build_site(second)

    assert first.config.static == {"site": "My Site"}
    assert second.output_dir == site / "public"
    assert "Renamed" in _read(site, "public/blog/first/index.html")


def test_build_from_relative_current_directory(site, monkeypatch):
    monkeypatch.chdir(site)

    run(pathlib.Path("."))

    assert _read(site, "public/blog/first/index.html").endswith("FIRST</main>")
    assert _read(site, "public/css/style.css") == "body {}"
    assert not (site / "public" / "log").exists()


def test_nested_public_directory_is_content(site):
    _write(site, "docs/public/guide.md", "---\ntitle: Guide\n---\nRead me")

    written = run(site)

    assert site / "public" / "docs" / "public" / "guide" / "index.html" in written
