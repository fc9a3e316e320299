"""Shared types, projection math and logging used across the tile_query package."""
