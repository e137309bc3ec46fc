"""
Core RAG pipeline: chunking, embeddings, retrieval, context assembly and
query orchestration.
"""
