from pydantic import BaseModel, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class Credentials(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ProfileUpdate(BaseModel):
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN)
    fullName: str | None = Field(default=None, min_length=1)
    profileImage: str | None = None


class ContactRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(pattern=EMAIL_PATTERN)
    message: str = Field(min_length=1)
