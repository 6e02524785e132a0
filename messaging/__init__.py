"""Messaging aggregator: conversation lists, message paging and unread tracking."""

__version__ = "1.0.0"
