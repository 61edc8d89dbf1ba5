"""Warehouse schema inference.

This module derives table schemas from datastore statistics and
creates one warehouse table per kind.
"""
