"""
Boundary adapters: vector stores, embedding and generation backends,
personality and document text sources.
"""
