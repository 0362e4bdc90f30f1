"""
All the routines to talk to the Kubernetes API.

The low-level transport (`api`) and the error normalization (`errors`)
know nothing about the resource kinds. The dispatching (`dispatching`)
and the watch-streams (`watching`) turn the raw documents into typed
resources using the factories provided by the callers.
"""
