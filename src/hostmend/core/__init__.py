"""Configuration, logging, process execution and result types."""
