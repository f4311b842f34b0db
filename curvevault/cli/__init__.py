"""Command line interface for curvevault."""
