"""Bookings app package.

This app encapsulates the booking lifecycle: the booking state machine,
room availability checks, price computation and the command layer that
runs every mutation inside one unit of work. Double bookings are
prevented by checking overlaps and writing the booking inside the same
transaction, with the room row locked where the backend supports it.
"""
