"""Mock sign-in. No credentials are checked."""

import time
from uuid import uuid4

from sleeptrack.api.schemas.profile import User


DEMO_USER_ID = "g-123"


def guest_login() -> User:
    return User(id=f"guest-{int(time.time() * 1000)}-{uuid4().hex[:8]}", name="Guest User", is_guest=True)


def demo_login() -> User:
    return User(
        id=DEMO_USER_ID,
        name="Alex Doe",
        email="alex.doe@example.com",
        avatar="https://picsum.photos/100/100",
        is_guest=False,
    )
