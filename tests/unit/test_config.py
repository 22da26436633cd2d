import os
from unittest.mock import patch

import pytest

from mongo_facade.config import MongoConfig, load_config


class TestLoadConfig:
    @patch.dict(
        os.environ, {"MONGODB_URI": "mongodb://localhost:27017"}, clear=True
    )
    def test_defaults(self):
        config = load_config()
        assert config.uri == "mongodb://localhost:27017"
        assert config.server_selection_timeout_ms == 30000
        assert config.socket_timeout_ms == 45000
        assert config.search_index == "default"

    @patch.dict(
        os.environ,
        {
            "MONGODB_URI": "mongodb+srv://user:pw@cluster.example.net",
            "MONGODB_SERVER_SELECTION_TIMEOUT_MS": "5000",
            "MONGODB_SOCKET_TIMEOUT_MS": "9000",
            "MONGODB_SEARCH_INDEX": "people",
        },
        clear=True,
    )
    def test_overrides(self):
        config = load_config()
        assert config.client_options() == {
            "serverSelectionTimeoutMS": 5000,
            "socketTimeoutMS": 9000,
        }
        assert config.search_index == "people"

    @patch.dict(os.environ, {}, clear=True)
    def test_missing_uri(self):
        with pytest.raises(ValueError, match="MONGODB_URI"):
            load_config()

    @patch.dict(os.environ, {"MONGODB_URI": "postgres://db"}, clear=True)
    def test_invalid_scheme(self):
        with pytest.raises(ValueError, match="scheme"):
            load_config()

    @patch.dict(
        os.environ,
        {
            "MONGODB_URI": "mongodb://localhost",
            "MONGODB_SOCKET_TIMEOUT_MS": "soon",
        },
        clear=True,
    )
    def test_non_integer_timeout(self):
        with pytest.raises(ValueError, match="integer"):
            load_config()

    @patch.dict(
        os.environ,
        {
            "MONGODB_URI": "mongodb://localhost",
            "MONGODB_SERVER_SELECTION_TIMEOUT_MS": "0",
        },
        clear=True,
    )
    def test_non_positive_timeout(self):
        with pytest.raises(ValueError, match="positive"):
            load_config()

    def test_frozen(self):
        config = MongoConfig(uri="mongodb://localhost")
        try:
            config.uri = "mongodb://elsewhere"
            assert False, "Should have raised FrozenInstanceError"
        except AttributeError:
            pass
