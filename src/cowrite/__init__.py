"""Artifact versioning and suggestion reconciliation for co-authored documents."""

__version__ = "0.1.0"
