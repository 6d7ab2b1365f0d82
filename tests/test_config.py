import pytest

from karts.core.config import DEFAULT_JWT_SECRET, Settings, validate_settings


def test_production_accepts_default_shared_password():
    config = Settings(ENVIRONMENT="production", JWT_SECRET_KEY="real-secret", SHARED_PASSWORD="1221")
    assert validate_settings(config) is True


def test_production_requires_real_jwt_secret():
    with pytest.raises(ValueError, match="JWT_SECRET_KEY"):
        validate_settings(Settings(ENVIRONMENT="production", JWT_SECRET_KEY=DEFAULT_JWT_SECRET))


def test_production_cloudinary_needs_cloud_name():
    config = Settings(
        ENVIRONMENT="production",
        JWT_SECRET_KEY="real-secret",
        STORAGE_BACKEND="cloudinary",
        CLOUDINARY_CLOUD_NAME="",
    )
    with pytest.raises(ValueError, match="CLOUDINARY_CLOUD_NAME"):
        validate_settings(config)


@pytest.mark.parametrize("letters", ["MB", "MME", "mbe", "M1E"])
def test_role_letters_must_be_three_distinct_capitals(letters):
    with pytest.raises(ValueError, match="ROLE_LETTERS"):
        validate_settings(Settings(ROLE_LETTERS=letters, BPASSWORD_ADMIN_CODE="E00002"))
