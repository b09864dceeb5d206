"""
Example table model.
"""

from typing import Optional

from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(max_length=255, unique=True)
    name: str = Field(max_length=64, index=True)
    age: int = Field(ge=0)
    gender: str = Field(max_length=16)
    department: str = Field(max_length=64)
