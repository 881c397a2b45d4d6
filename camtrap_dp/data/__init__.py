"""
Record types, table schemas and the CSV codec.

Defines the three Camtrap DP tables as typed records and converts them to and
from CSV text, with strict cell decoding at every read.
"""
