"""Loaders for declarative game definitions."""

from .json_loader import (
    load_games_file,
    load_games_from_json,
    parse_games_dict,
    validate_games_dict,
    validate_games_file,
)

__all__ = [
    "load_games_file",
    "load_games_from_json",
    "parse_games_dict",
    "validate_games_dict",
    "validate_games_file",
]
