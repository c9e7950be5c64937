"""wargamer.search

Loosely specified identifiers in, canonical catalog records out.
"""

from .catalog import Localizer, extract_top_modules
from .fuzzy import DEFAULT_THRESHOLD, FuzzyIndex, FuzzyMatch
from .resolver import EntityResolver, NamesCache

__all__ = [
    "DEFAULT_THRESHOLD",
    "EntityResolver",
    "FuzzyIndex",
    "FuzzyMatch",
    "Localizer",
    "NamesCache",
    "extract_top_modules",
]
