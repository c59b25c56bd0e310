"""Synchronization of repository templates into the template store."""
