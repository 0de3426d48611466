"""Adapters: httpx transport, authorization and token providers."""
