"""Command-line utilities built on the synchronization engine."""
