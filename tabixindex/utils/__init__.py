"""
Utility functions for tabixindex
"""

from .region import parse_region, region_to_interval

__all__ = [
    "parse_region",
    "region_to_interval",
]
