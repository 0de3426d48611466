"""Core of the CPR client: configuration, domain, errors and the client service."""
