"""Text and image helpers shared by the adapters."""
