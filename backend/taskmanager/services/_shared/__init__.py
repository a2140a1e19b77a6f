"""Cross-service building blocks (base service, errors, policies, ports)."""
