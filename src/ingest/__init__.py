"""Record normalization and streaming ingestion.

This module turns raw datastore entities into warehouse-safe rows
and submits them to the streaming insert endpoint.
"""
