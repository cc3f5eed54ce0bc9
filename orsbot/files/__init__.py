"""Attachment content extraction."""
