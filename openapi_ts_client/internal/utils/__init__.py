"""Утилиты для генератора"""

from .naming import (
    capitalize_first,
    extract_path_parameters,
    is_identifier,
    lower_first,
    strip_suffix,
    strip_url_chars,
    ts_member_access,
    ts_property_key,
    ts_string,
)

__all__ = [
    "capitalize_first",
    "extract_path_parameters",
    "is_identifier",
    "lower_first",
    "strip_suffix",
    "strip_url_chars",
    "ts_member_access",
    "ts_property_key",
    "ts_string",
]
