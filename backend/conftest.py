import pytest
from django.core.cache import cache


@pytest.fixture(autouse=True)
def _fast_hashing_and_fresh_throttles(settings):
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
    cache.clear()
    yield
    cache.clear()
