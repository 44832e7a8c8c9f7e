"""Spinner wrapper for long-running CLI work."""

from collections.abc import Generator
from contextlib import contextmanager

from .console import BRAND_COLOR, console


@contextmanager
def spinner(message: str) -> Generator[None, None, None]:
    """Display a spinner with a message while a block executes.

    Usage::

        with spinner("Rendering..."):
            do_slow_work()
    """
    with console.status(f"[{BRAND_COLOR}]{message}[/{BRAND_COLOR}]"):
        yield
