"""End-to-end tests driving the ``pvtrack`` command line."""
