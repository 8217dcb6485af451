"""HTTP request pipeline for the AfterShip API.

Handles parameter serialization, authentication headers, envelope
decoding and mapping of HTTP errors onto typed exceptions.
"""
