"""
Object storage boundary.

Exports: S3PhotoStorage
"""

from motoshop.boundary.storage.s3_client import S3PhotoStorage

__all__ = ["S3PhotoStorage"]
