from pydantic import BaseModel, ConfigDict
from datetime import datetime
from typing import Optional

class WorkspaceResponse(BaseModel):
    id: str
    name: str
    slug: str
    icon: Optional[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
