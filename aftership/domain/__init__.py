"""Domain Layer: resource models, identifiers, errors and events.

Contains no I/O. Everything here mirrors the shape of the remote API.
"""
