"""Operation catalog, outcome classification and orchestration."""
