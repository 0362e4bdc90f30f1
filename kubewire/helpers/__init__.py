"""
General-purpose helpers not related to the client itself
(neither to the dispatching nor to the watching nor to the kinds),
which are used to prepare and control the runtime environment.

As a rule of thumb, helpers MUST be abstracted from the library
to such an extent that they could be extracted as reusable libraries.
"""
