"""Role catalog, role resolution, and permission evaluation."""
