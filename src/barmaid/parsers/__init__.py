"""Container parsers for barmaid."""

from .btw import BTWParser, parse_container
from .heuristic import HeuristicPNGParser, scan_heuristic
