import httpx
import pytest

from proxy_destination.config import DEFAULT_URI
from proxy_destination.destination import TransparentProxyDestination
from proxy_destination.headers import Header
from proxy_destination.properties import DestinationProperty


class TestUriDefaults:

    def test_default_uri(self):
        destination = TransparentProxyDestination.builder().build()
        assert destination.get_uri() == httpx.URL(DEFAULT_URI)
        assert destination.properties.get("URL") == "http://dynamic:80"

    def test_instance_name(self):
        destination = TransparentProxyDestination.builder().instance_name("abc").build()
        assert destination.properties.get("URL") == "http://dynamic-abc:80"
        assert destination.get_uri() == httpx.URL("http://dynamic-abc:80")

    def test_instance_name_overwrites_uri(self):
        destination = (
            TransparentProxyDestination.builder()
            .property(DestinationProperty.URI, "http://other:8080")
            .instance_name("abc")
            .build()
        )
        assert destination.get(DestinationProperty.URI) == "http://dynamic-abc:80"

    def test_explicit_uri_is_kept(self):
        destination = TransparentProxyDestination.builder().property("URL", "https://example.org").build()
        assert destination.get_uri() == httpx.URL("https://example.org")

    def test_removed_uri_is_defaulted_again(self):
        destination = (
            TransparentProxyDestination.builder()
            .instance_name("abc")
            .remove_property(DestinationProperty.URI)
            .build()
        )
        assert destination.get(DestinationProperty.URI) == DEFAULT_URI


class TestProperties:

    def test_property_and_get(self):
        builder = TransparentProxyDestination.builder().property("ProxyPort", "3128")
        assert builder.get("ProxyPort") == "3128"
        assert builder.get(DestinationProperty.PROXY_PORT) == 3128
        assert builder.get("ProxyPort", int) == 3128

    def test_remove_property_by_name(self):
        builder = TransparentProxyDestination.builder().property("a", 1).remove_property("a").remove_property("a")
        assert builder.get("a") is None

    def test_values_are_not_validated_at_build(self):
        destination = TransparentProxyDestination.builder().property("URL", "::not a uri::").build()
        assert destination.properties.get("URL") == "::not a uri::"


class TestHeaders:

    def test_call_order_is_preserved(self):
        destination = (
            TransparentProxyDestination.builder()
            .header("a", "1")
            .headers([Header("b", "2"), Header("c", "3")])
            .header(Header("d", "4"))
            .build()
        )
        assert destination.get_headers(None) == (
            Header("a", "1"),
            Header("b", "2"),
            Header("c", "3"),
            Header("d", "4"),
        )

    def test_headers_accepts_any_iterable(self):
        destination = TransparentProxyDestination.builder().headers(Header(n, "v") for n in "xyz").build()
        assert [h.name for h in destination.get_headers(None)] == ["x", "y", "z"]

    @pytest.mark.parametrize(
        "method, name",
        [
            ("destination_name", "X-Destination-Name"),
            ("fragment_name", "X-Fragment-Name"),
            ("tenant_subdomain", "X-Tenant-Subdomain"),
            ("tenant_id", "X-Tenant-Id"),
            ("fragment_optional", "X-Fragment-Optional"),
        ],
    )
    def test_fixed_name_headers(self, method, name):
        builder = TransparentProxyDestination.builder().header("Existing", "1")
        destination = getattr(builder, method)("abc").build()

        assert destination.get_headers(None) == (Header("Existing", "1"), Header(name, "abc"))

    def test_destination_name_added_once(self):
        destination = TransparentProxyDestination.builder().destination_name("abc").build()
        matches = [h for h in destination.get_headers(None) if h.name == "X-Destination-Name"]
        assert matches == [Header("X-Destination-Name", "abc")]

    def test_header_requires_value_for_name(self):
        with pytest.raises(TypeError):
            TransparentProxyDestination.builder().header("a")

    def test_header_rejects_value_with_header(self):
        with pytest.raises(TypeError):
            TransparentProxyDestination.builder().header(Header("a", "1"), "2")


class TestBuild:

    def test_later_mutation_does_not_leak_into_built_destination(self):
        builder = TransparentProxyDestination.builder().header("a", "1").property("k", "v")
        first = builder.build()
        builder.header("b", "2").property("k", "changed")

        assert first.get_headers(None) == (Header("a", "1"),)
        assert first.properties.get("k") == "v"

    def test_builder_state_persists_across_builds(self):
        builder = TransparentProxyDestination.builder().header("a", "1")
        first = builder.build()
        second = builder.header("b", "2").build()

        assert len(second.get_headers(None)) == 2
        assert first != second

    def test_header_providers_are_retained(self):
        class Provider:
            def get_headers(self, context):
                return []

        p1, p2 = Provider(), Provider()
        destination = TransparentProxyDestination.builder().header_providers(p1).header_providers(p2).header_providers().build()
        assert destination.get_header_providers() == (p1, p2)

    def test_header_providers_rejects_non_providers(self):
        builder = TransparentProxyDestination.builder()
        with pytest.raises(TypeError, match="get_headers"):
            builder.header_providers(object())
        assert builder.build().get_header_providers() == ()

    def test_build_logs(self, caplog):
        with caplog.at_level("DEBUG", logger="proxy_destination.destination"):
            TransparentProxyDestination.builder().instance_name("abc").build()
        assert "http://dynamic-abc:80" in caplog.text
