"""Shared fixtures for marginalia tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from markdown_it import MarkdownIt
from markdown_it.rules_inline import StateInline

from marginalia import annotations_plugin


@pytest.fixture
def md() -> MarkdownIt:
    """A commonmark markdown-it instance with annotations installed."""
    return MarkdownIt("commonmark").use(annotations_plugin)


@pytest.fixture
def make_state(md: MarkdownIt) -> Callable[..., StateInline]:
    """Build a fresh inline state over ``src`` positioned at ``pos``."""

    def factory(src: str, pos: int = 0, env: dict | None = None) -> StateInline:
        state = StateInline(src, md, env if env is not None else {}, [])
        state.pos = pos
        return state

    return factory
