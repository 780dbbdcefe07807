"""
Runtime settings read from the environment.
"""
import os
from typing import Optional

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Settings for the data service connection and the HTTP server."""
    supabase_url: Optional[str] = Field(None, description="Supabase project URL")
    supabase_key: Optional[str] = Field(None, description="Supabase API key (service role preferred)")
    host: str = Field("0.0.0.0", description="Interface the HTTP server binds to")
    port: int = Field(3000, description="Port the HTTP server listens on")
    env: str = Field("development", description="Deployment environment name")

    @property
    def is_development(self) -> bool:
        return self.env.lower() == "development"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            supabase_url=os.getenv("SUPABASE_URL"),
            supabase_key=os.getenv("SUPABASE_KEY") or os.getenv("SUPABASE_SERVICE_ROLE"),
            host=os.getenv("SUPAGATE_HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            env=os.getenv("SUPAGATE_ENV", "development"),
        )
