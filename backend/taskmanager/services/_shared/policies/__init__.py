"""Authorization policies shared by services."""
