"""
Test data factories.

Usage:
    users = UserFactory.seed()
    user = UserFactory.create(name="Zhang", age=27)
"""

import uuid
from typing import Optional

from bitcrud.example.models import User


# (id, name, age, gender, department)
SEED_USERS = [
    (1, "Kain", 26, "Male", "IT"),
    (2, "Joanna", 31, "Female", "Sale"),
    (3, "Stuart", 27, "Male", "IT"),
    (4, "Vanessa", 24, "Female", "Designer"),
    (5, "Vivianne", 36, "Male", "Sale"),
    (6, "Max", 28, "Female", "Designer"),
    (7, "Eileen", 33, "Female", "Support"),
    (8, "Marcia", 37, "Female", "Support"),
    (9, "Harold", 42, "Male", "IT"),
    (10, "Nora", 29, "Female", "Sale"),
]


class UserFactory:
    """Factory for creating User instances."""

    @classmethod
    def create(
        cls,
        name: Optional[str] = None,
        email: Optional[str] = None,
        age: int = 30,
        gender: str = "Female",
        department: str = "IT",
        id: Optional[int] = None,
    ) -> User:
        if name is None:
            name = f"user_{uuid.uuid4().hex[:8]}"
        if email is None:
            email = f"{name}@VX.com"
        return User(
            id=id,
            email=email,
            name=name,
            age=age,
            gender=gender,
            department=department,
        )

    @classmethod
    def payload(cls, **overrides) -> dict:
        """JSON body for /w/create."""
        user = cls.create(**overrides)
        return user.model_dump(exclude={"id"})

    @classmethod
    def seed(cls) -> list[User]:
        return [
            cls.create(id=id_, name=name, age=age, gender=gender, department=department)
            for id_, name, age, gender, department in SEED_USERS
        ]
