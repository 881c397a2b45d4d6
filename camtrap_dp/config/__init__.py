"""
Configuration loading and validation.

Provides strongly typed settings objects for HTTP fetching and default data
locations, loaded from environment variables with upfront validation.
"""
