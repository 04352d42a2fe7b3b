"""Unit tests.

Purpose
- Verify a single module/class/function in isolation.

Guidelines
- No real I/O; the in-memory store and a fixed clock stand in for the
  database and the wall clock.
- Prefer behavior-centric assertions over implementation details.
- Keep tests small, fast, and deterministic.
"""
