from .validator import validate_players, pretty_summary
from .io import read_players, write_players, load_players, DEFAULT_PLAYERS_PATH

__all__ = ["validate_players", "pretty_summary", "read_players", "write_players",
           "load_players", "DEFAULT_PLAYERS_PATH"]
