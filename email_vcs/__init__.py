"""Synchronizes markdown email templates from a GitHub repository to Mandrill."""
