"""Shared helpers for the design pipeline."""

from .images import convert_to_png, sniff_mime_type, split_data_uri, to_data_uri
from .retry import is_transient_error, with_retry

__all__ = [
    "convert_to_png",
    "sniff_mime_type",
    "split_data_uri",
    "to_data_uri",
    "is_transient_error",
    "with_retry",
]
