"""Pipeline stages: history, canonicalization, resolution, stopwords, metadata.

Each stage exposes a small, mostly pure function API; the plugin wires them
together in that order.
"""
