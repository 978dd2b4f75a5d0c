"""Game domain services: session state, the reducer and timers.

This package contains pure(ish) domain logic that should be imported by
socket handlers, keeping transport concerns separated from core game
mechanics.
"""
