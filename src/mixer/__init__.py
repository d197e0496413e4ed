"""mixer — compose OS update content and images."""

__version__ = "0.1.0"
