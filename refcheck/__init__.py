"""
refcheck - Streaming referential integrity checks for OSM-style datasets.
"""

__version__ = "0.1.0"
