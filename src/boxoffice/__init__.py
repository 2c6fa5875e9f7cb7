"""Seat-hold and booking client for a movie-ticket booking API."""

__version__ = "0.1.0"
