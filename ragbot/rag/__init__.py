"""RAG (Retrieval-Augmented Generation) pipeline components.

This package contains modules for:
- Word-count chunking
- Embedding generation with rate-limit backoff
- JSON vector storage
- Cosine similarity search
- Training and retrieval workflows
"""
