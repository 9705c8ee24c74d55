"""
Data structures exchanged with the host orchestrator and the clusters' APIs.

All the structures are purely declarative: no external calls
or any i/o activities are done here.
"""
