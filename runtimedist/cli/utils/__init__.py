"""Terminal output helpers for the ``rtd`` command."""
