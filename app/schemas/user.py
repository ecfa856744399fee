from pydantic import BaseModel, EmailStr, validator
from typing import Optional
from datetime import datetime

class UserSummary(BaseModel):
    """Public profile fields shown next to requests, friends and recommendations"""
    id: str
    full_name: str
    profile_pic: str = ""
    bio: str = ""
    native_language: str = ""
    learning_language: str = ""
    location: str = ""

    class Config:
        from_attributes = True

class UserResponse(UserSummary):
    """Schema for the authenticated user's own record"""
    email: Optional[EmailStr] = None
    is_onboarded: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class OnboardingRequest(BaseModel):
    """Profile data required to complete onboarding"""
    full_name: str
    bio: str
    native_language: str
    learning_language: str
    location: str
    profile_pic: Optional[str] = None

    @validator('full_name', 'bio', 'native_language', 'learning_language', 'location')
    def validate_required_text(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('All onboarding fields are required')
        return v

    @validator('native_language', 'learning_language')
    def normalize_language(cls, v):
        return v.lower()

class CurrentUser(BaseModel):
    """Identity resolved by the auth dependency"""
    id: str
    email: Optional[str] = None
    full_name: str = ""
    is_onboarded: bool = False
