"""Denormalized read models composed from users, content and edges."""
