"""Command-line interface for DATASTASH."""
