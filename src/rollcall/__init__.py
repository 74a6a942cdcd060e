"""Rollcall - account-owned groups of people.

Users sign up with an email, receive a session cookie, and manage groups
and the people in them. Every resource belongs to an account and only
that account's users can see or change it.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
