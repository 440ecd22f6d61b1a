"""Facilities app package.

Sports facilities and their bookable pitches. Only the records the
booking engine reads are modelled here: ownership, activity flags and
the hourly rate that prices a booking.
"""
