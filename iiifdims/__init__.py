"""IIIF-backed media dimension service."""
