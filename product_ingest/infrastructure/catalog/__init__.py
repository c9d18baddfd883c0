"""Catalog document store adapters."""

from .firestore_catalog import FirestoreDocumentStore, to_firestore_fields, to_firestore_value
from .json_catalog import JsonDocumentStore

__all__ = [
    "FirestoreDocumentStore",
    "JsonDocumentStore",
    "to_firestore_fields",
    "to_firestore_value",
]
