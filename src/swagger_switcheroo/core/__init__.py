"""
Conversion core: rules, type resolution, post-processing and the engine.
"""
