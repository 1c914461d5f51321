"""Input adapters that normalize raw provider documents."""

from .normalize import (
    as_sequence,
    chunked,
    collect_player_keys,
    parse_league_document,
    parse_league_list,
    parse_player_stats_document,
    require,
    sequence_at,
)
from .points import extract_points
from .xml_tree import load_document, parse_xml_tree

__all__ = [
    "as_sequence",
    "chunked",
    "collect_player_keys",
    "extract_points",
    "load_document",
    "parse_league_document",
    "parse_league_list",
    "parse_player_stats_document",
    "parse_xml_tree",
    "require",
    "sequence_at",
]
