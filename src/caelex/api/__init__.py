"""Caelex HTTP API."""
