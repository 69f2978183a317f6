"""Built-in CLI commands registered by :func:`reqkit.app.main`."""
