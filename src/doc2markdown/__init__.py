"""Feishu document block tree to Markdown converter."""

__version__ = "1.0.0"
