from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence


class PostError(ValueError):
    """A document could not be turned into a post."""

    def __init__(self, path: str | Path, reason: str) -> None:
        super().__init__(str(path), reason)
        self.path = str(path)
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


class MalformedFrontMatter(PostError):
    pass


class MissingRequiredField(PostError):
    def __init__(self, path: str | Path, field: str) -> None:
        PostError.__init__(self, path, f"missing required field '{field}'")
        # args stay (path, field) so the error survives pickling across workers
        self.args = (str(path), field)
        self.field = field


class InvalidDateFormat(PostError):
    pass


class DuplicateSlug(PostError):
    def __init__(self, slug: str, paths: Sequence[str | Path]) -> None:
        paths = sorted(str(p) for p in paths)
        PostError.__init__(
            self, paths[0], f"duplicate slug '{slug}' (also {', '.join(paths[1:])})"
        )
        self.args = (slug, paths)
        self.slug = slug
        self.paths = paths


class PostLoadError(PostError):
    """Raised once per build with every offending document."""

    def __init__(self, errors: Iterable[PostError]) -> None:
        self.errors: List[PostError] = list(errors)
        PostError.__init__(self, "", f"{len(self.errors)} invalid document(s)")
        self.args = (self.errors,)

    def __str__(self) -> str:
        return "\n".join(str(err) for err in self.errors)
