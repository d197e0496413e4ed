"""Infrastructure layer — search-path lookup, profiling, builder collaborator.

This layer depends on stdlib and third-party libs (pydantic).
It may read config models but must never import from domain, services,
commands, or output.
"""
