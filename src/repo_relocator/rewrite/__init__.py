"""Compilation of rewrite intent into git filter-repo inputs."""

from .plan import compile_author_rewrite, compile_plan, compile_text_replacements, unsafe_literals

__all__ = [
    "compile_author_rewrite",
    "compile_plan",
    "compile_text_replacements",
    "unsafe_literals",
]
