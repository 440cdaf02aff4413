"""
Command Line Interface.

``swagger-switcheroo convert PATH...`` rewrites the Swagger annotations of the
given Java files in place.
"""
