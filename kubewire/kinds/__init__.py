"""
The typed resources: the kinds of the Kubernetes API.

The kinds are the collaborators of the clients: the clients only need
the API paths of the resources, a factory to build a typed resource from
a raw document (the kind's class itself), and the ``synced()`` hook.
"""
