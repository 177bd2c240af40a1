from __future__ import annotations

from .jsdata import (
    ImplementorsFormatError,
    load_implementors_file,
    parse_implementors_js,
    render_implementors_js,
    subject_display_name,
    subject_from_path,
)
from .loader import iter_implementor_files, load_implementors_dir

__all__ = [
    "ImplementorsFormatError",
    "parse_implementors_js",
    "render_implementors_js",
    "subject_from_path",
    "subject_display_name",
    "load_implementors_file",
    "iter_implementor_files",
    "load_implementors_dir",
]
