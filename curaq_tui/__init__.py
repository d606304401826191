"""
curaq-tui - Terminal client for the CuraQ article-curation service

Browse saved articles, read them in a distraction-free text reader,
add new links straight from the clipboard and mark articles as done,
all from the terminal. Ships with a set of colour themes.
"""

__version__ = "0.4.0"
__author__ = "polidog"
