"""Infrastructure layer.

Resolvers, loaders, caching and logging adapters for the terminology
engine.
"""
