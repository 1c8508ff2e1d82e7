"""Hosting provider API clients."""
