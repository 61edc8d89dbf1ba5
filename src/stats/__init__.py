"""Datastore statistics access.

This module reads the aggregate kind and property counters the store
maintains about itself. Schema inference consumes them read-only.
"""
