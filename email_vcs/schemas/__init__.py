"""Pydantic schemas for templates and webhook payloads."""
