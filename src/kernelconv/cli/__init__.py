"""Command-line front end for kernelconv."""
