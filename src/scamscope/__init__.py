"""scamscope: scam classification chat backed by an append-only conversation log."""

__version__ = "1.0.0"
