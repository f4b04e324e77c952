"""SymFinder - browse cscope query results from the terminal or the browser."""

__version__ = "0.1.0"
