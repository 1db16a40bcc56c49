"""
.. include:: ../README.md
"""

__all__ = [
    "cache",
    "config",
    "exceptions",
    "tzif",
    "zoneinfo_dir",
]
