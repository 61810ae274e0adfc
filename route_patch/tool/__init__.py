"""Command line tool for route-patch."""
