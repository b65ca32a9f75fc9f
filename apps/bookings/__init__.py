"""Bookings app package.

This app owns the reservation ledger: allocation of a free slot for a
time interval, close-out pricing and cancellation. No two confirmed
bookings overlap on the same slot; allocation checks availability
inside the transaction that inserts the booking, after locking the
space and its candidate slots.
"""
