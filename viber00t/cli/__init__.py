"""Command line interface for viber00t."""
