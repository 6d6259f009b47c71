"""Firewall Frenzy: a single-screen tower-defense game about stopping malware."""

__version__ = "0.1.0"
