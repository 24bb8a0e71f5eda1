"""Command implementations for the trunkver CLI."""
