"""API Resilience Implementations.

Tracks the server-reported rate limit and retries calls with
exponential backoff on transient errors.
Bounded Context: API Resilience
"""
