"""Display view models for the PR monitor dashboard and CLI."""
