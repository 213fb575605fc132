"""Core configuration, logging, errors and result types."""
