"""
Core modules for the badge generator.

This package contains dimension selection, diversity attributes,
retry handling and the batch orchestration logic.
"""
