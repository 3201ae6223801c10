"""Shared service accessors for routers and the CLI."""
