"""Core domain logic: sources, metadata, caching, sync and variants."""
