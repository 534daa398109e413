"""Utility exports."""

from .files import FileSet, content_type_for, file_size, list_workspace, replace_macro, split_patterns
from .logging import JsonFormatter, SecretRedactingFilter, configure_logging, get_logger

__all__ = [
    "FileSet",
    "JsonFormatter",
    "SecretRedactingFilter",
    "configure_logging",
    "content_type_for",
    "file_size",
    "get_logger",
    "list_workspace",
    "replace_macro",
    "split_patterns",
]
