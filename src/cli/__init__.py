"""Command-line interface.

This module maps argparse commands onto the kindsync SDK.
"""
