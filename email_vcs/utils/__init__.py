"""Utility modules for shared functionality."""
