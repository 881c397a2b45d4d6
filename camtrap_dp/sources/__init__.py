"""
Byte sources that feed the CSV codec.

Local files, in-memory bytes and HTTP(S) URLs all hand the codec a binary
stream; the codec never knows where the bytes came from.
"""
