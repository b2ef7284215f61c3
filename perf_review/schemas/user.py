from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from datetime import datetime
from typing import Optional
from perf_review.models.user import UserRole


class UserCreate(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    role: UserRole = UserRole.EMPLOYEE
    job_title: Optional[str] = None
    manager_id: Optional[int] = None

    @model_validator(mode="after")
    def only_employees_have_managers(self):
        if self.manager_id is not None and self.role != UserRole.EMPLOYEE:
            raise ValueError("manager_id may only be set for employees")
        return self


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    job_title: Optional[str] = None
    role: UserRole
    manager_id: Optional[int] = None
    created_at: Optional[datetime] = None


class TeamMemberCreate(BaseModel):
    """A manager adding an employee to their own team; job title is mandatory here."""
    name: str = Field(min_length=1)
    email: EmailStr
    job_title: str = Field(min_length=1)
