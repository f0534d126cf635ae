"""Command-line front-end for the ground-motion monitor."""
