"""Command line tools for QuickFFN."""
