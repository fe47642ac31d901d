"""Command groups registered into the main ``rtd`` group."""
