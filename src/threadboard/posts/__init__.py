"""Posts: storage, soft delete, and thread reconstruction."""
