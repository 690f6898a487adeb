"""Sigao environment provisioning."""

__version__ = "1.12.2"
