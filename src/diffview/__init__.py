"""diffview - structured unified diffs with word and split highlighting."""

__version__ = "0.1.0"
