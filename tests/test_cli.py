"""Tests for the manifest writer and the command line entry point."""

import json

import pytest

from blog_posts.cli import build_parser, main
from blog_posts.load import load_posts
from blog_posts.manifest import write_manifest


class TestManifest:
    """Tests for write_manifest."""

    def test_writes_posts_in_order(self, posts_dir, tmp_path):
        posts = load_posts(posts_dir)
        out = tmp_path / "site" / "data" / "posts.json"

        assert write_manifest(posts, out) == out

        records = json.loads(out.read_text(encoding="utf-8"))
        assert [r["slug"] for r in records] == [
            "2025-08-02-numbers-are-weird",
            "2025-07-29-memory-efficient-c-structs",
        ]
        assert records[0]["date"] == "2025-08-02"
        assert records[0]["tags"] == ["C", "blog", "tutorial"]
        assert records[0]["layout"] == "post"
        assert "body" not in records[0]

    def test_include_body(self, posts_dir, tmp_path):
        out = tmp_path / "posts.json"

        write_manifest(load_posts(posts_dir), out, include_body=True)

        records = json.loads(out.read_text(encoding="utf-8"))
        assert "Order members" in records[1]["body"]


class TestCli:
    """Tests for the blog-posts command."""

    def test_parser_defaults(self):
        args = build_parser().parse_args(["posts"])

        assert args.order == "desc"
        assert args.workers == 1
        assert args.start is None
        assert args.manifest is None

    def test_parser_rejects_bad_date(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["posts", "--start", "2025/01/01"])

    @pytest.mark.parametrize("limit", ["0", "-1", "two"])
    def test_parser_rejects_bad_limit(self, limit):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["posts", "--limit", limit])

    def test_lists_posts(self, posts_dir, capsys):
        main([str(posts_dir)])

        out = capsys.readouterr().out
        assert "2025-08-02  2025-08-02-numbers-are-weird  Numbers are weird" in out
        assert out.index("Numbers are weird") < out.index("Writing memory efficient")

    def test_ascending_with_limit(self, posts_dir, capsys):
        main([str(posts_dir), "--order", "asc", "--limit", "1"])

        out = capsys.readouterr().out
        assert "Writing memory efficient C structs" in out
        assert "Numbers are weird" not in out

    def test_filters_and_writes_manifest(self, posts_dir, tmp_path, capsys):
        out_path = tmp_path / "out" / "posts.json"

        main([str(posts_dir), "--tag", "tutorial", "--manifest", str(out_path)])

        records = json.loads(out_path.read_text(encoding="utf-8"))
        assert [r["title"] for r in records] == ["Numbers are weird"]
        assert "[done]" in capsys.readouterr().out

    def test_invalid_documents_exit(self, posts_dir, make_post, capsys):
        make_post("2025-1-01-broken.md", "no front matter\n")

        with pytest.raises(SystemExit) as exc_info:
            main([str(posts_dir)])

        assert exc_info.value.code != 0
        assert "2025-1-01-broken.md" in capsys.readouterr().out

    def test_missing_directory_exits(self, tmp_path):
        with pytest.raises(SystemExit, match="not found"):
            main([str(tmp_path / "missing")])
