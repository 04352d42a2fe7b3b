"""The ``pvtrack`` command-line interface."""
