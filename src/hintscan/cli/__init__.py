"""hintscan command-line interface."""
