"""
HTTP adapter for the galaxy generator.
"""
