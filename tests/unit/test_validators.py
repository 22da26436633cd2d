import pytest

from mongo_facade.validation.validators import (
    require_valid,
    validate_limit,
    validate_namespace,
    validate_pagination,
)


class TestValidateNamespace:
    def test_valid_names(self):
        result = validate_namespace("app", "users")
        assert result.valid is True
        assert result.errors == ()
        assert result.warnings == ()

    def test_empty_database(self):
        result = validate_namespace("", "users")
        assert result.valid is False
        assert any("database name" in e for e in result.errors)

    def test_empty_collection(self):
        result = validate_namespace("app", "")
        assert result.valid is False
        assert any("collection name" in e for e in result.errors)

    def test_forbidden_database_characters(self):
        result = validate_namespace("my.app", "users")
        assert result.valid is False
        assert any("forbidden" in e for e in result.errors)

    def test_database_name_too_long(self):
        result = validate_namespace("a" * 64, "users")
        assert result.valid is False

    def test_dollar_in_collection(self):
        result = validate_namespace("app", "us$ers")
        assert result.valid is False

    def test_system_collection_warns(self):
        result = validate_namespace("app", "system.views")
        assert result.valid is True
        assert any("system collection" in w for w in result.warnings)


class TestValidatePagination:
    def test_valid(self):
        assert validate_pagination(1, 10).valid is True

    def test_page_below_one(self):
        result = validate_pagination(0, 10)
        assert result.valid is False

    def test_page_size_below_one(self):
        result = validate_pagination(1, 0)
        assert result.valid is False

    def test_bool_is_not_a_page(self):
        assert validate_pagination(True, 10).valid is False

    def test_large_page_size_warns(self):
        result = validate_pagination(1, 5000)
        assert result.valid is True
        assert len(result.warnings) == 1


class TestValidateLimit:
    def test_limit(self):
        assert validate_limit(10).valid is True
        assert validate_limit(0).valid is False


class TestRequireValid:
    def test_passes_when_valid(self):
        require_valid(validate_namespace("app", "users"))

    def test_joins_errors(self):
        with pytest.raises(ValueError) as exc_info:
            require_valid(
                validate_namespace("", "users"), validate_pagination(0, 10)
            )
        message = str(exc_info.value)
        assert "database name" in message
        assert "page must be" in message

    def test_logs_warnings(self, caplog):
        with caplog.at_level("WARNING"):
            require_valid(validate_namespace("app", "system.views"))
        assert "system collection" in caplog.text
