"""Game domain services: deck, rules, rooms, bots and scoring.

This package contains the per-room game logic imported by the socket
handlers, keeping transport concerns separated from core game mechanics.
"""
