"""Foundation layer: configuration and error types."""
