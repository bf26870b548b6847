from pydantic import BaseModel, Field


class SignUpRequestDTO(BaseModel):
    email: str = Field(..., description="Login email", examples=["jane@example.com"])
    password: str = Field(..., description="At least 6 characters")
    name: str = Field(..., description="Display name", examples=["Jane"])


class SignInRequestDTO(BaseModel):
    email: str = Field(..., examples=["jane@example.com"])
    password: str


class IdentityResponseDTO(BaseModel):
    user_id: str
    name: str
    email: str


class SignInResponseDTO(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: IdentityResponseDTO


class ProfileUpdateRequestDTO(BaseModel):
    name: str = Field(..., description="New display name", examples=["Jane Doe"])
