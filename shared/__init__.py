"""
Shared Kernel

This module contains base classes and utilities shared across the booking
and wallet contexts: the error taxonomy, the clock, value objects, the
unit of work and the message bus.
"""
