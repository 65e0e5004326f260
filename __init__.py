"""
pbn2json
========
Converts Portable Bridge Notation (PBN) files into validated game records.

This package provides functionality to:
- Tokenize PBN text into tags, comments, directives and notes
- Decode Contract and Deal tags into structured contracts and hands
- Assemble and validate one game per board, dropping invalid boards
- Export the games as JSON (pretty or compact) or as a CSV table

The modules sit at the top level; import them directly, e.g.
``from pbn_parse import parse_pbn_file``.
"""

__version__ = "0.1.0"

