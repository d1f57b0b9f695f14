"""Domain layer.

Terminology entities, the expansion and validation services and the
exceptions they raise.
"""
