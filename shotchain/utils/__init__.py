"""Utility exports."""
from .io import atomic_text_write, log_path, read_json, write_json

__all__ = [
    "atomic_text_write",
    "log_path",
    "read_json",
    "write_json",
]
