"""Shared helpers used across the ingest and upload packages."""

from .naming import filename_to_display_name, suggest_upload_name

__all__ = ["filename_to_display_name", "suggest_upload_name"]
