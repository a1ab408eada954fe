"""Infrastructure: provider clients, logging, tracing, error reporting."""
