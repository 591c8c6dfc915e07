"""patchpick — curate, update and split git patches interactively."""

__version__ = "0.1.0"
