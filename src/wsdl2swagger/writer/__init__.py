"""Persistence of generated Swagger documents."""

from .document_writer import DocumentWriter

__all__ = ["DocumentWriter"]
