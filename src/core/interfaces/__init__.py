"""Interfaces/abstractions of the Core.

Why:
- Define contracts (Protocol) implemented by concrete adapters.
- The Core depends on abstractions, not on a specific identity platform.
"""
