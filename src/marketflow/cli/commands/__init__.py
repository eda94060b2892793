"""CLI command modules registered by marketflow.cli.main."""
