"""Shared utilities: errors, subprocess helpers, logging and validation."""
