"""
bgm-builder: builds the background-music dataset from the game archive and the
public BGM feeds.
"""

__version__ = "1.0.0"
