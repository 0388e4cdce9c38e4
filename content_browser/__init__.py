"""Read-only browser for content published through a content-delivery API."""
