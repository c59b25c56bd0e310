"""Mandrill template store and message dispatch collaborators."""
