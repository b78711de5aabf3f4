"""Command handlers dispatched by zigswitch.cli.parser."""
