from pydantic import BaseModel

class HealthResponse(BaseModel):
    status: str
    model: str
    timestamp: str
