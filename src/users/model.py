from datetime import date, datetime
from pydantic import EmailStr, Field, computed_field
from src.schemas.base import CamelModel
from src.entities.user import Gender, UserRole


class NewUserRequest(CamelModel):
    id: str = Field(min_length=1)
    name: str = Field(min_length=3, max_length=50)
    email: EmailStr
    image: str
    dob: date
    gender: Gender


class UserResponse(CamelModel):
    id: str
    name: str
    email: EmailStr
    image: str
    role: UserRole
    dob: date
    gender: Gender
    created_at: datetime

    @computed_field
    @property
    def age(self) -> int:
        today = date.today()
        age = today.year - self.dob.year
        if (today.month, today.day) < (self.dob.month, self.dob.day):
            age -= 1
        return age


class NewUserResponse(CamelModel):
    message: str
    user: UserResponse
