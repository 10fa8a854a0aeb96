"""Bundle storage domain exports."""

from .s3_bundle_store import BundleFetchError, BundleStore, S3BundleStore, download_bundle

__all__ = ["BundleFetchError", "BundleStore", "S3BundleStore", "download_bundle"]
