"""Recurring payments (memberships) service."""

__version__ = "0.1.0"
