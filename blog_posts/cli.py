from __future__ import annotations

from argparse import ArgumentParser, ArgumentTypeError
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

from .errors import PostLoadError
from .load import filter_posts, load_posts, sort_posts
from .manifest import write_manifest


def _iso_date(value: str) -> date:
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as exc:
        raise ArgumentTypeError(f"expected YYYY-MM-DD, got '{value}'") from exc


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise ArgumentTypeError(f"expected an integer, got '{value}'") from exc
    if number < 1:
        raise ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        description="Load, validate and list Markdown blog posts with front matter."
    )
    parser.add_argument("posts_dir", type=str, help="Directory of *.md posts")
    parser.add_argument(
        "--start", type=_iso_date, default=None, help="Start date YYYY-MM-DD (inclusive)"
    )
    parser.add_argument(
        "--end", type=_iso_date, default=None, help="End date YYYY-MM-DD (inclusive)"
    )
    parser.add_argument(
        "--tag", type=str, default=None, help="Only list posts carrying this tag"
    )
    parser.add_argument(
        "--order",
        choices=("asc", "desc"),
        default="desc",
        help="Sort posts by date: asc or desc (default: desc)",
    )
    parser.add_argument(
        "--limit", type=_positive_int, default=None, help="Only list the first N posts"
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of parallel loader processes (default: 1)",
    )
    parser.add_argument(
        "--manifest",
        type=str,
        default=None,
        help="Write the listed posts as a JSON manifest to this path",
    )
    parser.add_argument(
        "--include-body",
        action="store_true",
        help="Include raw post bodies in the manifest",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    posts_dir = Path(args.posts_dir)
    print(f"[load] {posts_dir}")
    try:
        posts = load_posts(posts_dir, workers=args.workers)
    except FileNotFoundError as exc:
        raise SystemExit(f"[error] {exc}") from exc
    except PostLoadError as exc:
        for err in exc.errors:
            print(f"[error] {err}")
        raise SystemExit(f"[error] {len(exc.errors)} invalid document(s), build stopped.")
    print(f"[load] valid posts: {len(posts)}")

    posts = filter_posts(posts, start=args.start, end=args.end, tag=args.tag)
    if args.order == "asc":
        posts = sort_posts(posts, descending=False)
    if args.limit is not None:
        posts = posts[: args.limit]

    for post in posts:
        print(f"{post.date.isoformat()}  {post.slug}  {post.title}")

    if args.manifest:
        manifest_path = write_manifest(
            posts, Path(args.manifest), include_body=args.include_body
        )
        print(f"[done] manifest written: {manifest_path}")


if __name__ == "__main__":
    main()
