from pydantic import BaseModel, Field, validator, EmailStr
from typing import Optional


class RegisterIn(BaseModel):
    # all optional here so that missing and empty fields get the same error
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None

    @validator("password")
    def password_max_bytes(cls, v):
        """Ensure password does not exceed bcrypt's 72-byte limit when UTF-8 encoded."""
        if isinstance(v, str) and len(v.encode("utf-8")) > 72:
            raise ValueError("password too long: must be at most 72 bytes when UTF-8 encoded")
        return v


class LoginIn(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AuthOut(BaseModel):
    success: bool = True
    user_id: str = Field(alias="userId")
    token: str

    class Config:
        populate_by_name = True


class UserOut(BaseModel):
    id: str
    name: Optional[str] = None
    email: str
    is_premium: bool = Field(False, alias="isPremium")
    brand_name: Optional[str] = Field(None, alias="brandName")
    logo_url: Optional[str] = Field(None, alias="logoUrl")
    primary_color: Optional[str] = Field(None, alias="primaryColor")
    custom_domain: Optional[str] = Field(None, alias="customDomain")

    class Config:
        from_attributes = True
        populate_by_name = True


class StatusOut(BaseModel):
    is_authenticated: bool = Field(alias="isAuthenticated")
    user: Optional[UserOut] = None

    class Config:
        populate_by_name = True


class BrandingIn(BaseModel):
    brand_name: Optional[str] = Field(None, alias="brandName")
    logo_url: Optional[str] = Field(None, alias="logoUrl")
    primary_color: Optional[str] = Field(None, alias="primaryColor")
    custom_domain: Optional[str] = Field(None, alias="customDomain")

    class Config:
        populate_by_name = True
