from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import FrozenSet


@dataclass(frozen=True)
class Post:
    """One article loaded from a Markdown document with front matter."""

    slug: str
    title: str
    date: date
    tags: FrozenSet[str] = frozenset()
    layout: str = "post"
    body: str = ""
    source: Path | None = field(default=None, compare=False)
