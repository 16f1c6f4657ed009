"""Infrastructure layer - Kuzu persistence for the domain models."""
