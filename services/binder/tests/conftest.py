import os
import pytest

# Config is initialized on import, so set environment variables at top level.
# SESSION_SECRET_KEY must be at least 32 characters.
os.environ.setdefault("SESSION_SECRET_KEY", "test-session-secret-key-must-be-32-chars")

from services.binder.core.binder import RequestBinder  # noqa: E402
from services.binder.core.conversion import ConversionService  # noqa: E402

USER_ID = "3fa85f64-5717-4562-b3fc-2c963f66afa6"


@pytest.fixture
def binder():
    return RequestBinder(conversion_service=ConversionService())


@pytest.fixture
def user_id():
    return USER_ID
