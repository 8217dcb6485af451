"""Core Layer: application services for each AfterShip resource.

Services build URL paths, call the request pipeline and decode the
response envelopes into domain models.
"""
