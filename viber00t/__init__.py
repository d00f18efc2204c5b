"""viber00t - layered, cached development containers for coding agents."""

__version__ = "1.0.0"

# Export main CLI for convenience
from .cli.main import cli

__all__ = ['cli']
