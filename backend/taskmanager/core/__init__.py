"""Framework glue: configuration, extensions, logging, errors and security."""
