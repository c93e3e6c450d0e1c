"""budelb package."""
