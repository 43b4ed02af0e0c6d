"""
Services module for business logic separation.

This module contains the slug store, the visit pipeline and the
enrichment services it depends on, kept separate from the API layer.
"""
