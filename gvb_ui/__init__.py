"""Command-line front end for gce-volume-harness."""
