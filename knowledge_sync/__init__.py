"""Stage, commit and publish all pending changes of a knowledge base repository."""

__version__ = "0.1.0"
