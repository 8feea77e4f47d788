"""Textual chat UI for scamscope."""
