"""Built-in CLI commands registered by :func:`apidraft.app.main`."""
