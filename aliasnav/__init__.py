"""Alias namespace and ranked search engine for URL shortcuts"""

__version__ = '0.1.0'
