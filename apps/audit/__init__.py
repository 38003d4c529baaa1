"""Append-only audit trail of mutations made by the booking core."""
