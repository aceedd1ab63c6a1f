from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    department: str
    customer_name: Optional[str] = None
    created_at: datetime
