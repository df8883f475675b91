"""
PTO balance schemas
"""
from pydantic import BaseModel, ConfigDict, computed_field


class BalanceOut(BaseModel):
    """PTO balance for one employee and year"""
    id: int
    employee_id: int
    year: int
    total_credits: int
    used_credits: int
    lwop_days: int

    model_config = ConfigDict(from_attributes=True)

    @computed_field
    @property
    def remaining_credits(self) -> int:
        return max(0, self.total_credits - self.used_credits)
