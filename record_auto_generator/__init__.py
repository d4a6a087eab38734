"""
Generate immutable record classes from a relational database schema.
"""

__version__ = "0.1.0"
