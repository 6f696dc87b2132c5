"""
API route handlers for different endpoint groups.

Each router handles a specific domain of functionality (health, content, games, etc.)
keeping the code organized and maintainable.
"""
