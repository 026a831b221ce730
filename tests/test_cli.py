from __future__ import annotations

import json
from pathlib import Path

from edithistory.cli import main


def _args(tmp_path, *rest: str) -> list[str]:
    return ["--config", str(tmp_path / "no-config.json"), "--date-format", "%Y-%m-%d", *rest]


def test_log_prints_history(repo, commit, tmp_path, capsys) -> None:
    first = commit("Add page", 86400, {"page.html": "v1\n"})
    second = commit("Fix page", 2 * 86400, {"page.html": "v2\n"})
    page = Path(repo.working_tree_dir) / "page.html"

    main(_args(tmp_path, "log", str(page)))

    out = capsys.readouterr().out
    assert f"{page} (2 edits)" in out
    assert f"{first.hexsha[:8]}  1970-01-02  Add page" in out
    assert f"{second.hexsha[:8]}  1970-01-03  Fix page" in out
    assert out.index("Add page") < out.index("Fix page")


def test_log_json_indexed(repo, commit, tmp_path, capsys) -> None:
    commit("Add pages", 86400, {"a.html": "a\n", "b.html": "b\n"})
    commit("Edit b\n\nWith a body.", 2 * 86400, {"b.html": "b2\n"})
    root = Path(repo.working_tree_dir)

    main(_args(tmp_path, "log", "--json", "--indexed", str(root / "a.html"), str(root / "b.html")))

    data = json.loads(capsys.readouterr().out)
    assert [e["summary"] for e in data[str(root / "a.html")]] == ["Add pages"]
    b_history = data[str(root / "b.html")]
    assert [e["date"] for e in b_history] == ["1970-01-02", "1970-01-03"]
    assert b_history[1]["message"] == "Edit b\n\nWith a body."
    assert b_history[1]["timestamp"] == "1970-01-03T00:00:00+00:00"


def test_log_without_history(tmp_path, capsys) -> None:
    loose = tmp_path / "loose.html"
    loose.write_text("x\n", encoding="utf-8")

    main(_args(tmp_path, "--no-search-parents", "log", str(loose)))

    out = capsys.readouterr().out
    assert f"{loose} (0 edits)" in out
    assert "No history available." in out


def test_timeline_json(repo, commit, tmp_path, capsys) -> None:
    commit("Publish", 86400, {"post.html": "v1\n"})
    commit("Revise", 5 * 86400, {"post.html": "v2\n"})
    post = Path(repo.working_tree_dir) / "post.html"

    main(_args(tmp_path, "timeline", "--json", str(post)))

    context = json.loads(capsys.readouterr().out)
    assert context["published_time"] == "1970-01-02T00:00:00+00:00"
    assert context["last_modified_time"] == "1970-01-06T00:00:00+00:00"
    assert context["date"] == "1970-01-02"
    assert [entry["summary"] for entry in context["history"]] == ["Publish", "Revise"]


def test_timeline_text(repo, commit, tmp_path, capsys) -> None:
    commit("Publish", 86400, {"post.html": "v1\n"})
    post = Path(repo.working_tree_dir) / "post.html"

    main(_args(tmp_path, "timeline", str(post)))

    out = capsys.readouterr().out
    assert f"Timeline for {post}:" in out
    assert "Published     : 1970-01-02T00:00:00+00:00" in out
    assert "1970-01-02  Publish" in out
