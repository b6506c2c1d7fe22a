"""Convert Markdown documents into an EPUB 3 book."""

__version__ = "0.1.0"
