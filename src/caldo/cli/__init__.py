"""Console entry points: board REPL (caldo) and task updater (caldo-tasks)."""
