"""Rewrite plan compilation for git filter-repo.

Produces the two inputs filter-repo consumes:

- a ``--commit-callback`` body that reassigns authorship on matching commits
- a ``--replace-text`` rules file of ``old==>new`` lines

Operator values are embedded verbatim as bytes literals. A double quote,
backslash or line break in a value yields a callback filter-repo cannot
compile or that matches something unintended; use unsafe_literals() to
report such values before running anything.
"""

from collections.abc import Mapping

from repo_relocator.models import RewriteIntent, RewritePlan

INDENT = "    "

_UNSAFE_CHARS = ('"', "\\", "\n", "\r")


def compile_author_rewrite(intent: RewriteIntent) -> str:
    """Compile the author-rewrite commit callback.

    Returns an empty string when there is no new identity to apply or no old
    identity to match. An empty match condition must never reach filter-repo.
    """
    if not (intent.new_author_name or intent.new_author_email):
        return ""
    old_emails = list(intent.old_author_emails or [])
    old_names = list(intent.old_author_names or [])
    if not old_emails and not old_names:
        return ""

    conditions = [f'commit.author_email == b"{email}"' for email in old_emails]
    conditions += [f'commit.author_name == b"{name}"' for name in old_names]

    lines = [f"if {' or '.join(conditions)}:"]
    if intent.new_author_name:
        lines.append(f'{INDENT}commit.author_name = b"{intent.new_author_name}"')
    if intent.new_author_email:
        lines.append(f'{INDENT}commit.author_email = b"{intent.new_author_email}"')
    return "\n".join(lines) + "\n"


def compile_text_replacements(replacements: Mapping[str, str] | None) -> str:
    """Compile the replace-text rules, one ``old==>new`` line per entry."""
    if not replacements:
        return ""
    return "".join(f"{old}==>{new}\n" for old, new in replacements.items())


def compile_plan(intent: RewriteIntent) -> RewritePlan:
    """Compile both halves of the rewrite plan."""
    return RewritePlan(
        author_callback=compile_author_rewrite(intent),
        text_replacements=compile_text_replacements(intent.text_replacements),
    )


def unsafe_literals(intent: RewriteIntent) -> list[str]:
    """List operator values that would break or distort the author callback."""
    values = [
        *(intent.old_author_emails or []),
        *(intent.old_author_names or []),
        intent.new_author_name or "",
        intent.new_author_email or "",
    ]
    return [v for v in values if any(c in v for c in _UNSAFE_CHARS)]
