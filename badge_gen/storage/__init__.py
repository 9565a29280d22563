"""
Result models and on-disk persistence for generated images.
"""
