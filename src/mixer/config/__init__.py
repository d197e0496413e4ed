"""Configuration — CLI settings, builder config models, logging setup."""
