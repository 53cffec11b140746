"""Helpers shared by the HTTP bridge routes."""
