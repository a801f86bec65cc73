import pytest

from primitive.settings.json import json_settings


@pytest.fixture()
def restore_json_settings():
    """
    Restores the default JSON functions after a test that replaces them.
    """
    yield json_settings
    json_settings.use()
