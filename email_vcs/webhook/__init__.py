"""Inbound GitHub push webhook handling."""
