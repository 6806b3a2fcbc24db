"""
Contact form intake API.
"""

__version__ = "0.1.0"
