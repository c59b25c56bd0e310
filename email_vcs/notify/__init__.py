"""Notification of sync results by email."""
