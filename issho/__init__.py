"""
Issho - find when a group overlaps best from everyone's marked availability.
"""

__version__ = "0.1.0"
