import pathlib
import sys

import pytest

from babe import cli


def _write(base: pathlib.Path, relative: str, text: str) -> pathlib.Path:
    path = base.joinpath(*relative.split("/"))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_main_builds_site(tmp_path, monkeypatch, capsys):
    _write(tmp_path, "_layouts/default.hbs", "<p>{{title}}</p>")
    _write(tmp_path, "index.md", "---\ntitle: Home\n---\n")
    monkeypatch.setattr(sys, "argv", ["babe", "--dir", str(tmp_path)])

    cli.main()

    assert (tmp_path / "public" / "index" / "index.html").read_text(encoding="utf-8") == "<p>Home</p>"
    assert "Build completed" in capsys.readouterr().out


def test_main_uses_environment_base_dir(tmp_path, monkeypatch):
    _write(tmp_path, "_layouts/default.hbs", "{{title}}")
    _write(tmp_path, "index.md", "---\ntitle: Env\n---\n")
    monkeypatch.setenv("BABE_DIR", str(tmp_path))
    monkeypatch.setattr(sys, "argv", ["babe"])

    cli.main()

    assert (tmp_path / "public" / "index" / "index.html").read_text(encoding="utf-8") == "Env"


def test_main_exits_on_build_error(tmp_path, monkeypatch, capsys):
    _write(tmp_path, "index.md", "---\nlayout: missing\n---\n")
    monkeypatch.setattr(sys, "argv", ["babe", "--dir", str(tmp_path)])

    with pytest.raises(SystemExit) as excinfo:
        cli.main()

    assert excinfo.value.code == 1
    assert "missing" in capsys.readouterr().err
