"""
Static analysis over the parsed units of a batch.
"""
