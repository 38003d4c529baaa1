"""Rooms app package.

Holds the Room aggregate (number, type, capacity, nightly rate and
operational status) and the administrative operations that must respect
the bookings referencing a room.
"""
