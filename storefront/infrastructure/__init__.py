"""Infrastructure layer - configuration, logging and content store clients."""
