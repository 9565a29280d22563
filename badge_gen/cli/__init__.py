"""
Command-line interface for the badge generator.
"""
