"""Rides app housekeeping services."""
