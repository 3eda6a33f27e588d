"""Thought Translator: rewrite rough thoughts into polished text."""

__version__ = "0.1.0"
