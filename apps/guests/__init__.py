"""Guests app package.

Guests are keyed by email. A booking either references an existing guest
by id or carries a full profile; the profile is matched against stored
emails before a new guest row is created.
"""
