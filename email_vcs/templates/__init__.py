"""Parsing and rendering of markdown email templates."""

from .exceptions import ParseError
from .parser import parse_labels, parse_markdown, render_markdown

__all__ = [
    "ParseError",
    "parse_labels",
    "parse_markdown",
    "render_markdown",
]
