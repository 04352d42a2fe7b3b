"""Integration tests.

Purpose
- Exercise the application wired to real backends (SQLite files, the local
  filesystem) through bootstrap.
"""
