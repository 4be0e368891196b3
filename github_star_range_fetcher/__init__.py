"""Collect GitHub repositories by star range.

Splits a star range into fixed-size chunks so each search stays under
GitHub's 1000-result search limit, then merges the chunks into one sheet.
"""

from .cli import main
from .fetch_star_ranges import fetch_star_ranges
from .sheets import SheetStore

__all__ = ["main", "fetch_star_ranges", "SheetStore"]

if __name__ == "__main__":
    main()
