"""Kharcha: personal finance tracking"""

__version__ = "1.0.0"
