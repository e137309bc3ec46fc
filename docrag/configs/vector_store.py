"""
Vector store configuration settings.

Manages Chroma connection settings and backend selection.

Dependencies: pydantic, pydantic_settings
System role: Vector database configuration for RAG retrieval
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class VectorStoreSettings(BaseSettings):
    """Vector store configuration (in-memory for dev, Chroma for prod)."""

    store_type: str = Field(
        default="chroma",
        description="Vector store type: 'memory' for local dev, 'chroma' for a Chroma server",
    )
    chroma_host: str = Field(default="localhost", description="Chroma server host")
    chroma_port: int = Field(default=8000, description="Chroma server port")
    chroma_ssl: bool = Field(default=False, description="Use HTTPS for the Chroma server")
    distance_metric: str = Field(
        default="cosine",
        description="Distance space for new collections (cosine, ip, l2)",
    )

    class Config:
        """Pydantic config."""

        env_prefix = "VECTOR_STORE_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"
