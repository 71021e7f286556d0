"""Application workflows that orchestrate runtime services for the CLI."""
