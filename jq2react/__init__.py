"""jQuery to React component converter"""

__version__ = "0.1.0"
