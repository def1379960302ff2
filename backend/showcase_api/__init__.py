"""Notification backend for the game showcase platform."""
