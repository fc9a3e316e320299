"""
Tile Query Test Suite

Structure:
- unit/: Unit tests for individual components (projection, zoom, partition, loading, sampling, assembly)
- integration/: HTTP API and CLI over real tile files
- factories.py: PNG tile builders and fake async loaders
"""
