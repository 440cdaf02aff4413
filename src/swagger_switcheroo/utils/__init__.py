"""
Console and logging helpers.
"""
