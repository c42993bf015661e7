"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest


NUMBERS_POST = """---
layout: post
title: "Numbers are weird"
date: 2025-08-02
tags: [blog, tutorial, C]
---

Integers in C wrap around:

```c
unsigned char c = 255;
c++; /* 0 */
```
"""

STRUCTS_POST = """---
layout: post
title: "Writing memory efficient C structs"
date: 2025-07-29
tags: [blog, C]
---

Order members from largest to smallest alignment.
"""


def write_post(directory: Path, name: str, text: str) -> Path:
    path = directory / name
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def make_post(tmp_path):
    """Write a document into tmp_path and return its path."""

    def _make(name: str, text: str) -> Path:
        return write_post(tmp_path, name, text)

    return _make


@pytest.fixture
def posts_dir(tmp_path):
    """Directory holding the two sample articles."""
    write_post(tmp_path, "2025-8-02-numbers-are-weird.md", NUMBERS_POST)
    write_post(tmp_path, "2025-7-29-memory-efficient-c-structs.md", STRUCTS_POST)
    return tmp_path
