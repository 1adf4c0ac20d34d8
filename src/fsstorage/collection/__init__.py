"""
Collection Layer
================

Pattern-driven storage: an ``Identifier`` derives a key from each record and
``CollectionStorage`` stores the record under it.
"""

from .entry import Entry
from .identifier import Identifier
from .parsers import make_date_parser
from .storage import CollectionStorage

__all__ = [
    "Entry",
    "Identifier",
    "CollectionStorage",
    "make_date_parser",
]
