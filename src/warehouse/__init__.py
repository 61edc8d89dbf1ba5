"""Warehouse REST access.

This module builds authenticated HTTP clients and talks to the
table-management endpoint of the warehouse.
"""
