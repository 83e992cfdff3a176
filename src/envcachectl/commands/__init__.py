"""Subcommand implementations wired by `envcachectl.cli.main`."""
