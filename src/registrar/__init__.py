"""Registrar - course enrollment with prerequisite checks, schedule conflicts and waitlists."""

__version__ = "0.1.0"
