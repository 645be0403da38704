"""
optikit - Flutter project helper CLI
"""

__version__ = "1.1.0"
