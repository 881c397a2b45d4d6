"""
camtrap_dp - typed tables of a Camera Trap Data Package.

Reads and writes the deployments, media and observations tables of a
Camtrap DP as typed, immutable records. CSV text is the only wire format;
tables come from local files or from URLs.
"""

__version__ = "0.1.0"
