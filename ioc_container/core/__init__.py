"""
Core layer: domain records, interfaces and error kinds.

This layer has no dependencies on the application or infrastructure layers.
"""
