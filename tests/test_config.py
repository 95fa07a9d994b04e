import pytest

from mindmatch.core.config import Settings
from mindmatch.core.errors import (
    AlreadyExistsError, AlreadyRegisteredError, ForbiddenError, NotFoundError, Result,
)
from mindmatch.services.ai_advisors import validate_api_keys


@pytest.mark.parametrize("url", [
    "",
    "   ",
    "postgresql://postgres:pw@db.placeholder.supabase.co:5432/postgres",
    "postgresql://user:pw@xyzcompany.supabase.co/postgres",
])
def test_unconfigured_database_uses_mock_backend(url):
    assert Settings(database_url=url).use_mock_backend


def test_real_database_url_uses_live_backend():
    settings = Settings(database_url="postgresql://app:pw@db.internal:5432/mindmatch")
    assert not settings.use_mock_backend


def test_defaults():
    settings = Settings()
    assert settings.openai_model == "gpt-4"
    assert settings.jwt_algorithm == "HS256"
    assert settings.bcrypt_rounds == 4  # from the test environment


def test_validate_api_keys():
    assert validate_api_keys(Settings()) == {"openai": False, "huggingface": False}
    keys = validate_api_keys(Settings(openai_api_key="sk-x", huggingface_api_key="hf-x"))
    assert keys == {"openai": True, "huggingface": True}


def test_error_status_codes():
    assert NotFoundError().status_code == 404
    assert AlreadyRegisteredError().status_code == 409
    assert isinstance(AlreadyRegisteredError(), AlreadyExistsError)
    assert ForbiddenError().status_code == 403
    assert NotFoundError().message == "NotFoundError"


def test_result_unwrap():
    assert Result.success(3).unwrap() == 3
    assert Result.success(None).ok
    failed = Result.failure(NotFoundError("gone"))
    assert not failed.ok
    assert failed.data is None
    with pytest.raises(NotFoundError, match="gone"):
        failed.unwrap()
