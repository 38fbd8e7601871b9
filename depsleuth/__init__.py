"""Discover the third-party components of software projects from their manifests and lock files."""

__version__ = "1.9.0"