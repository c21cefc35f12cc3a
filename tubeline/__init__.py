"""Tubeline - a video and micro-post social API built on Litestar."""

__version__ = "0.1.0"
