"""
FastAPI dependencies for request processing.

Dependencies provide reusable logic that can be injected into API endpoints:
the shared ModelManager, the in-memory question queue and game sessions.
"""
