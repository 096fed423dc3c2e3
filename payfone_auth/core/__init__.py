"""Core building blocks for the Payfone authentication client."""
