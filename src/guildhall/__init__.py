"""Guildhall: community board API with reports and moderation."""

__version__ = "0.1.0"
