"""Package filtering."""

from libalibe.filters.chain import apply_filters, select_locations
from libalibe.filters.ignore import filter_by_ignore, should_ignore
from libalibe.filters.scope import filter_by_scope, match_name, parse_scope

__all__ = [
    "apply_filters",
    "filter_by_ignore",
    "filter_by_scope",
    "match_name",
    "parse_scope",
    "select_locations",
    "should_ignore",
]
