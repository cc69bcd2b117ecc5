"""
.. include:: ../README.md
"""

__all__ = [
    "compose",
    "component",
    "decoder",
    "diagnostics",
    "document",
    "encoder",
    "exceptions",
    "properties",
    "records",
    "report",
    "settings",
    "timezone",
    "types",
    "util",
    "values",
]
