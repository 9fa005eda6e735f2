"""Broadcast station market map pipeline."""
