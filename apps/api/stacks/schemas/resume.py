from pydantic import BaseModel


class ResumeStatusResponse(BaseModel):
    hasResumeData: bool
    experienceCount: int = 0
    educationCount: int = 0


class ClearResumeDataResponse(BaseModel):
    success: bool = True
    deletedExperience: int = 0
    deletedEducation: int = 0
