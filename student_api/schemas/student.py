from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictInt


class StudentBase(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    age: StrictInt = Field(ge=1, le=100)


class StudentCreate(StudentBase):
    pass


class StudentUpdate(StudentBase):
    pass


class Student(StudentBase):
    id: int

    model_config = ConfigDict(from_attributes=True)


class StudentResponse(BaseModel):
    """Envelope returned by create and update."""
    success: bool = True
    id: int
    student: Student
    message: str
