"""Presentation helpers shared by the CLI and web hosts."""
