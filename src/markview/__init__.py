"""Markdown to renderable rich-text document model."""

__version__ = "0.1.0"
