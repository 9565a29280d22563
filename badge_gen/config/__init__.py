"""
Configuration, budget tracking and style presets.
"""
