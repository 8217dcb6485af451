"""Domain Events emitted by the request pipeline.
"""
