"""Core image caching and launch functionality for viber00t."""
