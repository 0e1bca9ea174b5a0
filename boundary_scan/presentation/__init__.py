"""
Presentation Layer

Command-line front end for hue scans.
"""
