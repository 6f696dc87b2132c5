"""
FastAPI application layer for the Sahayak teaching assistant.

This module provides HTTP endpoints that run the generation flows (stories,
worksheets, lesson plans, scripts, speech, images) and the learning games.
"""
