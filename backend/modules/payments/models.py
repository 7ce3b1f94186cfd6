"""
Payments module data models.
"""

from typing import Optional

from pydantic import BaseModel, Field


class Charge(BaseModel):
    """A charge the gateway reported as successful."""

    id: str = Field(..., description="Gateway charge ID")
    amount: int = Field(..., description="Amount in minor currency units")
    currency: str = Field(..., description="ISO currency code, lowercase")
    description: str = Field(default="", description="Statement description")
    customer: Optional[str] = Field(None, description="Charged payment method / customer")

    model_config = {"frozen": True}
