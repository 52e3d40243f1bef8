"""Turn proposed file edits into GitHub pull request suggestions."""

__version__ = "0.1.0"
