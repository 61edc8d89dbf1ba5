"""Shared configuration, errors, logging, and typed models.

This module holds the pieces every other kindsync layer depends on.
"""
