"""Publish multi-platform social posts from one request."""

__version__ = "0.1.0"
