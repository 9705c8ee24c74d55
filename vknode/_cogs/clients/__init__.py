"""
All the routines to talk to the Kubernetes APIs of the local & remote clusters.

This is NOT a Kubernetes client. It is a set of dedicated adapters
specially tailored to relay the pods of the virtual node, not the generic
Kubernetes object manipulation.

This library is supposed to be mocked when the mocked K8s API is needed,
and only the high-level logic has to be tested, not the API calls themselves.
"""
