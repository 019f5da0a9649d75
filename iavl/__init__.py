"""Encodings, LRU cache, in-memory database, batching and compressed export streams for a versioned AVL+ store."""

__version__ = "0.1.0"