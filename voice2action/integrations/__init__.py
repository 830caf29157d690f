"""Integrations with external services that execute confirmed actions."""
