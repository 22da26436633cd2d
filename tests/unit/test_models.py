from mongo_facade.errors import UnknownStoreError
from mongo_facade.models import (
    NO_RESULTS,
    Failure,
    FuzzyOptions,
    Page,
    QueryUpdatePair,
    Success,
)


class TestSuccess:
    def test_to_dict_with_data(self):
        envelope = Success(data={"id": 42})
        assert envelope.to_dict() == {"data": {"id": 42}, "code": 0}
        assert envelope.ok is True

    def test_to_dict_keeps_empty_list(self):
        assert Success(data=[]).to_dict() == {"data": [], "code": 0}

    def test_to_dict_message_only(self):
        envelope = Success(message="All data deleted successfully.")
        assert envelope.to_dict() == {
            "message": "All data deleted successfully.",
            "code": 0,
        }

    def test_to_dict_keeps_explicit_null_result(self):
        envelope = Success(message="Query updated successfully.", result=None)
        assert envelope.to_dict() == {
            "result": None,
            "message": "Query updated successfully.",
            "code": 0,
        }

    def test_to_dict_omits_unset_result(self):
        assert "result" not in Success(data=[1]).to_dict()

    def test_frozen(self):
        envelope = Success(data=1)
        try:
            envelope.code = -4
            assert False, "Should have raised FrozenInstanceError"
        except AttributeError:
            pass


class TestPage:
    def test_to_dict(self):
        page = Page(
            data=[{"a": 1}], total_count=1, page=1, page_size=10, total_pages=1
        )
        assert page.to_dict() == {
            "data": [{"a": 1}],
            "totalCount": 1,
            "page": 1,
            "pageSize": 10,
            "totalPages": 1,
            "code": 0,
        }


class TestFailure:
    def test_no_results(self):
        assert NO_RESULTS.ok is False
        assert NO_RESULTS.to_dict() == {
            "error": "No Results",
            "message": "No documents matched the query.",
            "code": -1,
        }

    def test_error_object_included_when_set(self):
        error = RuntimeError("boom")
        envelope = Failure(
            error="Unknown error", message="m", code=-4, error_object=error
        )
        assert envelope.to_dict()["errorObject"] is error

    def test_unknown_store_error_envelope(self):
        cause = RuntimeError("socket closed")
        exc = UnknownStoreError(cause)
        assert exc.code == -4
        assert exc.envelope.error == "Unknown error"
        assert exc.envelope.error_object is cause
        assert "socket closed" in str(exc)


class TestRequestModels:
    def test_fuzzy_defaults(self):
        assert FuzzyOptions().to_document() == {
            "maxEdits": 2,
            "prefixLength": 3,
            "maxExpansions": 100,
        }

    def test_query_update_pair_frozen(self):
        pair = QueryUpdatePair(query={"id": 1}, data={"a": 1})
        try:
            pair.query = {}
            assert False, "Should have raised FrozenInstanceError"
        except AttributeError:
            pass
