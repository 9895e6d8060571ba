"""Command line interface for crate-advisor."""
