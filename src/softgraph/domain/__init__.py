"""Domain layer — identifiers and node lifecycle rules.

This layer depends only on the stdlib.
It must never import from services, infrastructure, commands, or config.
"""
