"""Front matter handling for Markdown posts.

A document starts with a line of three hyphens, a YAML block, and a second
line of three hyphens. Everything after the closing line is the body and is
returned as-is.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Tuple
import re

import frontmatter
import yaml

from .errors import MalformedFrontMatter
from .types import Post

DELIMITER_PATTERN = re.compile(r"^---[ \t]*$")
TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


def split_front_matter(text: str, path: str | Path = "<string>") -> Tuple[str, str]:
    """Return ``(block, body)`` for a document, or raise MalformedFrontMatter."""

    text = text.lstrip("\ufeff")
    lines = text.splitlines(keepends=True)
    if not lines or not DELIMITER_PATTERN.match(lines[0].rstrip("\r\n")):
        raise MalformedFrontMatter(path, "missing opening '---' delimiter")

    for index in range(1, len(lines)):
        if DELIMITER_PATTERN.match(lines[index].rstrip("\r\n")):
            block = "".join(lines[1:index])
            body = "".join(lines[index + 1 :])
            return block, body

    raise MalformedFrontMatter(path, "missing closing '---' delimiter")


class _PlainDateLoader(yaml.SafeLoader):
    """Safe loader that leaves timestamps as strings for the post loader to check."""


_PlainDateLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def parse_front_matter(
    text: str, path: str | Path = "<string>"
) -> Tuple[Dict[str, Any], str]:
    block, body = split_front_matter(text, path)
    try:
        metadata = yaml.load(block, Loader=_PlainDateLoader)
    except (yaml.YAMLError, ValueError) as exc:
        raise MalformedFrontMatter(path, f"unparsable YAML ({exc})") from exc

    if metadata is None:
        return {}, body
    if not isinstance(metadata, dict):
        raise MalformedFrontMatter(
            path, f"front matter is a {type(metadata).__name__}, not a mapping"
        )
    return {str(key): value for key, value in metadata.items()}, body


def dump_front_matter(post: Post) -> str:
    """Serialize a post's structured fields and body back into a document."""

    document = frontmatter.Post(
        post.body,
        layout=post.layout,
        title=post.title,
        date=post.date,
        tags=sorted(post.tags),
    )
    return frontmatter.dumps(document) + "\n"
