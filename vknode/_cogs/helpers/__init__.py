"""
General-purpose helpers not related to the node provider itself,
which are used to prepare and control the runtime environment.

Helpers do not depend on anything else in the package. They implement
no entities or behaviours of the virtual node's domain, only some unrelated
low-level patterns and type definitions.
"""
