"""
Annotation mapping table: JSON data plus its pydantic schema.
"""
