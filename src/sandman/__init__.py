"""Sandman - scheduled, content-hashed directory backups to S3."""

__version__ = "0.3.0"
