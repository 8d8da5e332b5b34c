"""Built-in CLI sub-commands (``generate``, ``inspect``)."""
