"""viber00t CLI commands."""
