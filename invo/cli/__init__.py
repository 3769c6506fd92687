"""Command line interface for the INVO SDK."""
