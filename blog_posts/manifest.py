from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable
import json

from .types import Post


def _post_record(post: Post, include_body: bool) -> Dict[str, Any]:
    record: Dict[str, Any] = {
        "slug": post.slug,
        "title": post.title,
        "date": post.date.isoformat(),
        "tags": sorted(post.tags),
        "layout": post.layout,
        "source": str(post.source) if post.source else None,
    }
    if include_body:
        record["body"] = post.body
    return record


def write_manifest(
    posts: Iterable[Post],
    output_path: Path,
    include_body: bool = False,
) -> Path:
    """
    Write posts, in the given order, as a JSON array for the site renderer.
    """
    records = [_post_record(post, include_body) for post in posts]

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", encoding="utf-8") as f:
        json.dump(records, f, ensure_ascii=False, indent=2)
        f.write("\n")

    return output_path
