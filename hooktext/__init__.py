"""Sentence filters, block markup files, translation wrapping, hook codes and text threads."""

__version__ = "0.1.0"