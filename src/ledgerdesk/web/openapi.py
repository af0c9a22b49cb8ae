from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "At least one item is required", "type": "invalid_items"},
                {"message": "Invoice not found", "type": "not_found"},
                {"message": "Service temporarily unavailable, please retry.", "type": "store_unavailable"},
            ]
        }
    }
