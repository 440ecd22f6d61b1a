"""Bookings app package.

This app holds the pitch booking engine: players request a time slot on a
pitch, the request is priced from the pitch's hourly rate and stays
pending until the facility confirms, rejects or cancels it. Only
confirmed bookings occupy a slot. Overlaps are checked under a per
(pitch, date) lock row and, on PostgreSQL, also forbidden by an exclusion
constraint.
"""
