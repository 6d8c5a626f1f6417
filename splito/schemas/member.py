from pydantic import BaseModel

class Member(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True
