"""
Pydantic models for API request/response schemas.

These models define the shape of data that flows between the frontend and backend.
Flow inputs and outputs are reused directly; this package adds the response envelopes.
"""
