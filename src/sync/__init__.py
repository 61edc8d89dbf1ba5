"""Export-cycle orchestration.

This module exposes the SDK client that wires statistics, schema
inference, and streaming ingestion into one export cycle.
"""
