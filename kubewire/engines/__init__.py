"""
Engines are the side-concerns of the client, not the API communication itself:
e.g. the logging setup and the per-resource log formatting.
"""
