"""Built-in plugins shipped with the host."""
