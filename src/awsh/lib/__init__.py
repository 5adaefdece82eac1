"""awsh library modules.

Configuration, boto3 client construction and output formatting.
"""

__all__ = [
    "clients",
    "config_parser",
    "formatting",
]
