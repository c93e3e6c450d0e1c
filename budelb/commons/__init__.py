"""budelb.commons package."""
