# health_companion/schemas/common/common.py
from pydantic import BaseModel
from typing import Any, Dict, List, Optional

class ErrorResponse(BaseModel):
    success: bool = False
    error: Optional[str] = None
    errors: Optional[List[Dict[str, Any]]] = None

class MessageResponse(BaseModel):
    message: str
