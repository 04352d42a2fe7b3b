"""Shared helpers for the PVTRACK test suite."""
