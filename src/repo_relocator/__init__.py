"""Move GitHub repositories between accounts while rewriting their history."""

__version__ = "0.1.0"
