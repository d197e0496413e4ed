"""Domain layer — the command tree and its declared dependencies.

This layer depends only on stdlib and click.
It must never import from services, infrastructure, commands, or config.
"""
