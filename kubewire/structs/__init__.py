"""
All the data structures used across the library: raw documents,
settings, semantic versions, and the dict-walking helpers.

Structs do not perform any I/O, they only describe the data and its rules.
"""
