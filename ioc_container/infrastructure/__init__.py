"""
Infrastructure layer: configuration, logging and module loading.
"""
