"""Domain models for the CPR client.

Why:
- Pure, strict data structures (Pydantic v2).
- The domain knows nothing about HTTP, the CLI or token providers.
"""
