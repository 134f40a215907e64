"""CLI command implementations, one module per subcommand with a run(args) function."""
