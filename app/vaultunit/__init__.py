"""vaultunit - move home directory paths into and out of a versioned vault."""

__version__ = "0.1.0"
