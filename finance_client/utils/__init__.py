"""Utility helpers for logging and date handling."""
