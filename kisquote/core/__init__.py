"""Core quote retrieval components."""
