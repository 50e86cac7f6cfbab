from __future__ import annotations

from pydantic import BaseModel, Field, StrictStr


class ServerInfo(BaseModel):
    """Body of ``GET /info``: the version the server reports about itself."""

    version: StrictStr = Field(..., description="Server version string, reported as-is")
