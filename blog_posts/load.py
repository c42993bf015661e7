from __future__ import annotations

from collections import defaultdict
from concurrent.futures import ProcessPoolExecutor, as_completed
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
import math
import os
import re

from .errors import (
    DuplicateSlug,
    InvalidDateFormat,
    MalformedFrontMatter,
    MissingRequiredField,
    PostError,
    PostLoadError,
)
from .frontmatter import parse_front_matter
from .types import Post

FILENAME_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})-(.+)$")
DATE_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2})(?:[Tt ]\S.*)?$")
DEFAULT_LAYOUT = "post"

LoadResult = Union[Post, PostError]


def parse_filename(path: Path) -> Tuple[str, Optional[date]]:
    """Derive ``(slug, date)`` from a ``YYYY-M-DD-title-slug.md`` filename.

    The date prefix is zero-padded in the slug. Stems without a valid date
    prefix are returned unchanged with no date.
    """

    stem = Path(path).stem
    match = FILENAME_PATTERN.match(stem)
    if not match:
        return stem, None

    year, month, day, rest = match.groups()
    try:
        file_date = date(int(year), int(month), int(day))
    except ValueError:
        return stem, None
    return f"{file_date.isoformat()}-{rest}", file_date


def _parse_date(value: Any, path: Path) -> date:
    # explicit !!timestamp tags still arrive as date objects
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    match = DATE_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidDateFormat(path, f"date {value!r} does not match YYYY-MM-DD")
    try:
        return datetime.strptime(match.group(1), "%Y-%m-%d").date()
    except ValueError as exc:
        raise InvalidDateFormat(path, f"'{value}' is not a calendar date") from exc


def _parse_tags(value: Any) -> frozenset:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        return frozenset(value.split())
    if isinstance(value, (list, tuple, set)):
        return frozenset(str(tag).strip() for tag in value if str(tag).strip())
    return frozenset([str(value)])


def load_post(path: Path) -> Post:
    """Read and validate a single document."""

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedFrontMatter(path, f"not valid UTF-8 ({exc.reason})") from exc
    metadata, body = parse_front_matter(text, path)

    title = metadata.get("title")
    if title is None or not str(title).strip():
        raise MissingRequiredField(path, "title")
    if metadata.get("date") is None:
        raise MissingRequiredField(path, "date")

    slug, _ = parse_filename(path)
    layout = metadata.get("layout") or DEFAULT_LAYOUT

    return Post(
        slug=slug,
        title=str(title).strip(),
        date=_parse_date(metadata["date"], path),
        tags=_parse_tags(metadata.get("tags")),
        layout=str(layout),
        body=body,
        source=path,
    )


def _load_one(path: Path) -> LoadResult:
    try:
        return load_post(path)
    except PostError as exc:
        return exc


def _load_batch(indexed_paths: List[Tuple[int, str]]) -> List[Tuple[int, LoadResult]]:
    """Load a batch of (index, path) in a worker process."""

    results: List[Tuple[int, LoadResult]] = []
    total = len(indexed_paths)
    for position, (index, path_str) in enumerate(indexed_paths, start=1):
        print(f"[worker pid={os.getpid()}] {position}/{total}: {path_str}")
        results.append((index, _load_one(Path(path_str))))
    return results


def _load_parallel(paths: List[Path], workers: int) -> List[LoadResult]:
    workers = min(workers, len(paths))
    indexed: List[Tuple[int, str]] = [(i, str(p)) for i, p in enumerate(paths)]
    chunk_size = math.ceil(len(indexed) / workers)
    chunks = [indexed[i : i + chunk_size] for i in range(0, len(indexed), chunk_size)]

    print(f"[load] parallel workers={len(chunks)}, total_documents={len(paths)}")

    combined: List[Tuple[int, LoadResult]] = []
    with ProcessPoolExecutor(max_workers=len(chunks)) as executor:
        futures = [executor.submit(_load_batch, chunk) for chunk in chunks]
        for fut in as_completed(futures):
            combined.extend(fut.result())

    combined.sort(key=lambda item: item[0])
    return [result for _, result in combined]


def _find_duplicates(posts: Iterable[Post]) -> List[DuplicateSlug]:
    by_slug: Dict[str, List[Path]] = defaultdict(list)
    for post in posts:
        by_slug[post.slug].append(post.source)
    return [
        DuplicateSlug(slug, paths)
        for slug, paths in sorted(by_slug.items())
        if len(paths) > 1
    ]


def load_posts(directory: Path, workers: int = 1) -> List[Post]:
    """Load every ``*.md`` document in ``directory``, newest first.

    Every invalid document is reported together in a single PostLoadError;
    nothing is returned unless the whole directory is valid.
    """

    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Posts directory not found: {directory}")

    paths = sorted(p for p in directory.glob("*.md") if p.is_file())
    if not paths:
        return []

    if workers <= 1:
        results = [_load_one(path) for path in paths]
    else:
        results = _load_parallel(paths, workers)

    posts = [r for r in results if isinstance(r, Post)]
    errors: List[PostError] = [r for r in results if isinstance(r, PostError)]
    errors.extend(_find_duplicates(posts))
    if errors:
        raise PostLoadError(errors)

    return sort_posts(posts)


def sort_posts(posts: Iterable[Post], descending: bool = True) -> List[Post]:
    """Order by date (newest first by default), ties broken by slug ascending."""

    ordered = sorted(posts, key=lambda p: p.slug)
    ordered.sort(key=lambda p: p.date, reverse=descending)
    return ordered


def filter_posts(
    posts: Iterable[Post],
    start: date | None = None,
    end: date | None = None,
    tag: str | None = None,
) -> List[Post]:
    """Keep posts within [start, end] carrying ``tag``, preserving order."""

    return [
        p
        for p in posts
        if (start is None or p.date >= start)
        and (end is None or p.date <= end)
        and (tag is None or tag in p.tags)
    ]
