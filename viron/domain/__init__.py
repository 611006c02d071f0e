"""Business rules of Viron, independent of HTTP and persistence."""
