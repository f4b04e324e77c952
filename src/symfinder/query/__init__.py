"""Query execution: process runner, line parser, result set builder and session."""
