from api_test_updater.diff.models import (
    NewEndpoint,
    NewMethod,
    NewParameter,
    ParameterChange,
    RemovedEndpoint,
)
from api_test_updater.ranking.extractor import (
    extract_endpoints,
    is_useful_identifier,
    path_variants,
    scan_details,
    split_operation_id,
)


class TestPathVariants:
    def test_parameterized_path(self):
        assert path_variants("/api/v1/users/{userId}") == [
            "/api/v1/users/{userId}",
            "/api/v1/users",
            "/api/v1/users",
            "/api/v1",
        ]

    def test_strips_from_first_parameter_segment(self):
        variants = path_variants("/v1/users/{id}/orders")
        assert variants[1] == "/v1/users"
        assert "/v1/users/{id}/orders" in variants
        assert all("{" not in v for v in variants[1:])

    def test_plain_path_prefixes_longest_first(self):
        assert path_variants("/v1/users/settings") == [
            "/v1/users/settings",
            "/v1/users/settings",
            "/v1/users",
        ]

    def test_root_and_relative_paths_ignored(self):
        assert path_variants("/") == []
        assert path_variants("users") == []


class TestScanDetails:
    def test_finds_quoted_paths(self):
        assert scan_details('[{"callback": "/hooks/user-created"}]') == ["/hooks/user-created"]

    def test_ignores_short_paths(self):
        assert scan_details('[{"x": "/ab"}]') == []

    def test_operation_id_becomes_path(self):
        assert scan_details('{"operationId": "listUserAccounts"}') == ["/list/user/accounts"]

    def test_operation_id_with_only_short_parts(self):
        assert scan_details('{"operationId": "byId"}') == []


class TestSplitOperationId:
    def test_camel_case(self):
        assert split_operation_id("getUserById") == ["get", "user"]

    def test_snake_and_kebab(self):
        assert split_operation_id("delete_order-items") == ["delete", "order", "items"]


class TestIsUsefulIdentifier:
    def test_rejects_generic_markers(self):
        for generic in ("/api", "/v1", "/v2"):
            assert not is_useful_identifier(generic)

    def test_rejects_short(self):
        assert not is_useful_identifier("/ab")

    def test_rejects_single_letter(self):
        assert not is_useful_identifier("/x")

    def test_accepts_real_path(self):
        assert is_useful_identifier("/v1/users")


class TestExtractEndpoints:
    def test_deduplicates_in_first_seen_order(self):
        changes = [
            NewMethod(path="/v1/users", method="post"),
            NewEndpoint(path="/v1/users/{id}"),
        ]
        assert extract_endpoints(changes) == ["/v1/users", "/v1/users/{id}"]

    def test_generic_prefixes_filtered(self):
        identifiers = extract_endpoints([RemovedEndpoint(path="/api/v2/orders")])
        assert identifiers == ["/api/v2/orders", "/api/v2"]
        assert "/api" not in identifiers

    def test_details_with_path_like_parameter(self):
        change = ParameterChange(
            path="/v1/users",
            method="get",
            details=[NewParameter(parameter="/v1/accounts/lookup", location="query")],
        )
        assert extract_endpoints([change]) == ["/v1/users", "/v1/accounts/lookup"]

    def test_no_paths_no_identifiers(self):
        assert extract_endpoints([]) == []

    def test_excluded_identifiers_never_returned(self):
        changes = [NewEndpoint(path=p) for p in ("/api", "/v1", "/v2", "/a", "/ab")]
        assert extract_endpoints(changes) == []
