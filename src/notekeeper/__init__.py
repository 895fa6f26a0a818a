"""Notekeeper: personal notes with tags, categories and public sharing."""

__version__ = "1.0.0"
