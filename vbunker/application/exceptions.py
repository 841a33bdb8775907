class ProfileStoreError(RuntimeError):
    """Raised when the profile store cannot persist a value (disk full, permissions)."""
    pass
