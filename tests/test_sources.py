"""Unit tests for field resolution in each source adapter."""

from unittest.mock import MagicMock, patch

import pytest

from fakes import make_obj


def _view(obj, api=None):
    from startpage_mcp_tool.sources.view import ObjectView

    return ObjectView(obj, api=api)


class TestFieldResolvers:

    @pytest.mark.unit
    def test_first_present_annotation_wins(self):
        from startpage_mcp_tool.sources.fields import NAME_KEYS, from_annotations, lowercase

        view = _view(make_obj("x", annotations={
            "forecastle.stakater.com/appName": "Forecastle",
            "hajimari.io/appName": "Hajimari",
        }))
        assert from_annotations(NAME_KEYS, lowercase)(view) == "hajimari"

    @pytest.mark.unit
    def test_label_used_when_annotation_absent(self):
        from startpage_mcp_tool.sources.fields import ENABLE_KEYS, as_bool, from_annotations

        view = _view(make_obj("x", labels={"startpunkt.ullberg.us/enable": "true"}))
        assert from_annotations(ENABLE_KEYS, as_bool)(view) is True

    @pytest.mark.unit
    def test_resolve_first_falls_through(self):
        from startpage_mcp_tool.sources.fields import (
            GROUP_KEYS, from_annotations, lowercase, metadata_namespace, resolve_first,
        )

        view = _view(make_obj("x", namespace="Media", annotations={}))
        chain = (from_annotations(GROUP_KEYS, lowercase), metadata_namespace)
        assert resolve_first(view, chain) == "media"

    @pytest.mark.unit
    def test_required_spec_raises(self):
        from startpage_mcp_tool.errors import MalformedObjectError
        from startpage_mcp_tool.sources.fields import required_spec

        with pytest.raises(MalformedObjectError):
            required_spec("url")(_view(make_obj("x", spec={})))

    @pytest.mark.unit
    def test_unparseable_integer_is_malformed(self):
        from startpage_mcp_tool.errors import MalformedObjectError
        from startpage_mcp_tool.sources.fields import as_int, from_spec

        with pytest.raises(MalformedObjectError):
            from_spec("location", as_int)(_view(make_obj("x", spec={"location": "first"})))

    @pytest.mark.unit
    def test_as_bool(self):
        from startpage_mcp_tool.sources.fields import as_bool

        assert as_bool("TRUE") is True
        assert as_bool(True) is True
        assert as_bool("yes") is False
        assert as_bool("false") is False

    @pytest.mark.unit
    def test_append_root_path(self):
        from startpage_mcp_tool.sources.fields import append_root_path

        assert append_root_path("https://a.com/", "admin") == "https://a.com/admin"
        assert append_root_path("https://a.com", "/admin") == "https://a.com/admin"
        assert append_root_path("https://a.com", "  ") == "https://a.com"
        assert append_root_path(None, "/admin") is None


class TestNativeApplication:

    @pytest.mark.unit
    def test_structural_fields(self):
        from startpage_mcp_tool.sources import native_application_adapter

        obj = make_obj("sonarr-app", namespace="apps", spec={
            "name": "Sonarr",
            "group": "Media",
            "url": "https://sonarr.example.com",
            "icon": "mdi:television",
            "iconColor": "blue",
            "info": "TV shows",
            "targetBlank": True,
            "location": 3,
            "enabled": True,
            "tags": "media,arr",
        })
        d = native_application_adapter().extract(_view(obj))
        assert d.name == "sonarr"
        assert d.group == "media"
        assert d.url == "https://sonarr.example.com"
        assert d.icon == "mdi:television"
        assert d.icon_color == "blue"
        assert d.info == "TV shows"
        assert d.target_blank is True
        assert d.location == 3
        assert d.enabled is True
        assert d.tags == "media,arr"
        assert d.namespace == "apps"
        assert d.resource_name == "sonarr-app"
        assert d.source == "startpunkt"

    @pytest.mark.unit
    def test_defaults(self):
        from startpage_mcp_tool.sources import native_application_adapter

        obj = make_obj("x", namespace="Home", spec={"name": "App", "url": "http://app"})
        d = native_application_adapter().extract(_view(obj))
        assert d.group == "home"
        assert d.location == 1000
        assert d.enabled is None
        assert d.target_blank is None
        assert d.icon is None

    @pytest.mark.unit
    def test_zero_location_normalized(self):
        from startpage_mcp_tool.sources import native_application_adapter

        adapter = native_application_adapter()
        zero = adapter.extract(_view(make_obj("a", spec={"name": "a", "url": "u", "location": 0})))
        unset = adapter.extract(_view(make_obj("a", spec={"name": "a", "url": "u"})))
        assert zero.location == unset.location == 1000

    @pytest.mark.unit
    def test_missing_name_is_malformed(self):
        from startpage_mcp_tool.errors import MalformedObjectError
        from startpage_mcp_tool.sources import native_application_adapter

        with pytest.raises(MalformedObjectError):
            native_application_adapter().extract(_view(make_obj("a", spec={"url": "u"})))

    @pytest.mark.unit
    def test_missing_url_is_malformed(self):
        from startpage_mcp_tool.errors import MalformedObjectError
        from startpage_mcp_tool.sources import native_application_adapter

        with pytest.raises(MalformedObjectError):
            native_application_adapter().extract(_view(make_obj("a", spec={"name": "a"})))

    @pytest.mark.unit
    def test_spec_root_path_beats_annotation(self):
        from startpage_mcp_tool.sources import native_application_adapter

        obj = make_obj(
            "a",
            spec={"name": "a", "url": "https://a.com/", "rootPath": "/ui"},
            annotations={"startpunkt.ullberg.us/rootPath": "/other"},
        )
        d = native_application_adapter().extract(_view(obj))
        assert d.url == "https://a.com/ui"
        assert d.root_path == "/ui"

    @pytest.mark.unit
    def test_annotation_root_path_when_spec_blank(self):
        from startpage_mcp_tool.sources import native_application_adapter

        obj = make_obj(
            "a",
            spec={"name": "a", "url": "https://a.com", "rootPath": " "},
            annotations={"startpunkt.ullberg.us/rootPath": "admin"},
        )
        assert native_application_adapter().extract(_view(obj)).url == "https://a.com/admin"

    @pytest.mark.unit
    def test_tags_fall_back_to_annotation(self):
        from startpage_mcp_tool.sources import native_application_adapter

        obj = make_obj(
            "a", spec={"name": "a", "url": "u"},
            annotations={"startpunkt.ullberg.us/tags": "ops"},
        )
        assert native_application_adapter().extract(_view(obj)).tags == "ops"

    @pytest.mark.unit
    def test_owner_references(self):
        from startpage_mcp_tool.sources import native_application_adapter

        adapter = native_application_adapter()
        owned = make_obj("a", spec={"name": "a", "url": "u"},
                         ownerReferences=[{"kind": "Deployment", "name": "a"}])
        argo = make_obj("b", spec={"name": "b", "url": "u"},
                        managedFields=[{"manager": "argocd-controller"}])
        plain = make_obj("c", spec={"name": "c", "url": "u"})
        assert adapter.extract(_view(owned)).has_owner_references is True
        assert adapter.extract(_view(argo)).has_owner_references is True
        assert adapter.extract(_view(plain)).has_owner_references is False


class TestUrlFrom:

    @pytest.mark.unit
    def test_extract_property(self):
        from startpage_mcp_tool.sources.native import extract_property

        obj = {"status": {"loadBalancer": {"ingress": [{"hostname": "lb.example.com"}]}}}
        assert extract_property(obj, "status.loadBalancer.ingress[0].hostname") == "lb.example.com"
        assert extract_property(obj, "status.loadBalancer.ingress[3].hostname") is None
        assert extract_property(obj, "status.missing") is None
        assert extract_property(obj, "") is None

    @pytest.mark.unit
    @patch("startpage_mcp_tool.sources.native.get_object")
    def test_url_from_reference_wins(self, mock_get_object):
        from startpage_mcp_tool.sources import native_application_adapter

        mock_get_object.return_value = {"spec": {"host": "https://grafana.example.com"}}
        obj = make_obj("grafana", namespace="monitoring", spec={
            "name": "grafana",
            "url": "http://fallback",
            "rootPath": "/login",
            "urlFrom": {
                "apiVersion": "route.openshift.io/v1",
                "kind": "Route",
                "name": "grafana",
                "property": "spec.host",
            },
        })
        d = native_application_adapter().extract(_view(obj, api=MagicMock()))
        assert d.url == "https://grafana.example.com/login"
        args = mock_get_object.call_args[0]
        assert args[1:6] == ("route.openshift.io", "v1", "routes", "monitoring", "grafana")

    @pytest.mark.unit
    @patch("startpage_mcp_tool.sources.native.get_object")
    def test_url_from_missing_reference_falls_back(self, mock_get_object):
        from startpage_mcp_tool.sources import native_application_adapter

        mock_get_object.return_value = None
        obj = make_obj("a", spec={
            "name": "a",
            "url": "http://fallback",
            "urlFrom": {"apiVersion": "v1", "kind": "Service", "name": "a", "property": "spec.clusterIP"},
        })
        d = native_application_adapter().extract(_view(obj, api=MagicMock()))
        assert d.url == "http://fallback"

    @pytest.mark.unit
    @patch("startpage_mcp_tool.sources.native.get_object")
    def test_url_from_lookup_uses_request_timeout(self, mock_get_object):
        from startpage_mcp_tool.config import NamespaceScope
        from startpage_mcp_tool.sources import native_application_adapter

        from fakes import fake_api

        mock_get_object.return_value = {"spec": {"host": "grafana.example.com"}}
        api = fake_api({("startpunkt.ullberg.us", "applications"): [make_obj("grafana", spec={
            "name": "grafana",
            "url": "http://fallback",
            "urlFrom": {
                "apiVersion": "route.openshift.io/v1", "kind": "Route",
                "name": "grafana", "property": "spec.host",
            },
        })]})
        result = native_application_adapter().collect(api, NamespaceScope.all(), timeout=7)
        assert [d.url for d in result] == ["grafana.example.com"]
        assert mock_get_object.call_args.kwargs["timeout"] == 7

    @pytest.mark.unit
    @patch("startpage_mcp_tool.sources.native.get_object")
    def test_url_from_non_string_property_falls_back(self, mock_get_object):
        from startpage_mcp_tool.config import NamespaceScope
        from startpage_mcp_tool.sources import native_application_adapter

        from fakes import fake_api

        mock_get_object.return_value = {"spec": {"host": "x"}}
        api = fake_api({("startpunkt.ullberg.us", "applications"): [
            make_obj("odd", spec={
                "name": "odd",
                "url": "http://odd.fallback",
                "urlFrom": {"apiVersion": "v1", "kind": "Service", "name": "odd", "property": 5},
            }),
            make_obj("good", spec={"name": "good", "url": "http://good.example.com"}),
        ]})
        result = native_application_adapter().collect(api, NamespaceScope.all())
        assert sorted(d.url for d in result) == ["http://good.example.com", "http://odd.fallback"]

    @pytest.mark.unit
    def test_url_from_incomplete_falls_back(self):
        from startpage_mcp_tool.sources import native_application_adapter

        obj = make_obj("a", spec={
            "name": "a", "url": "http://fallback", "urlFrom": {"kind": "Service"},
        })
        d = native_application_adapter().extract(_view(obj, api=MagicMock()))
        assert d.url == "http://fallback"


class TestHajimari:

    @pytest.mark.unit
    def test_application_requires_group(self):
        from startpage_mcp_tool.errors import MalformedObjectError
        from startpage_mcp_tool.sources import hajimari_application_adapter

        with pytest.raises(MalformedObjectError):
            hajimari_application_adapter().extract(
                _view(make_obj("a", spec={"name": "a", "url": "u"}))
            )

    @pytest.mark.unit
    def test_application_enabled_by_default(self):
        from startpage_mcp_tool.sources import hajimari_application_adapter

        obj = make_obj("a", spec={"name": "Plex", "group": "Media", "url": "http://plex", "location": "0"})
        d = hajimari_application_adapter().extract(_view(obj))
        assert d.name == "plex"
        assert d.group == "media"
        assert d.enabled is True
        assert d.location == 1000
        assert d.source == "hajimari"

    @pytest.mark.unit
    def test_bookmark_defaults(self):
        from startpage_mcp_tool.sources import hajimari_bookmark_adapter

        obj = make_obj("GitHub", namespace="Links", spec={"url": "https://github.com"})
        d = hajimari_bookmark_adapter().extract(_view(obj))
        assert d.name == "github"
        assert d.group == "links"
        assert d.location == 1000


class TestNativeBookmark:

    @pytest.mark.unit
    def test_bookmark_fields(self):
        from startpage_mcp_tool.sources import native_bookmark_adapter

        obj = make_obj("docs", namespace="default", spec={
            "name": "Docs", "group": "Reading", "url": "https://docs.example.com",
            "targetBlank": "true", "location": 2,
        })
        d = native_bookmark_adapter().extract(_view(obj))
        assert (d.name, d.group, d.url, d.target_blank, d.location) == (
            "docs", "reading", "https://docs.example.com", True, 2,
        )

    @pytest.mark.unit
    def test_bookmark_without_url_is_malformed(self):
        from startpage_mcp_tool.errors import MalformedObjectError
        from startpage_mcp_tool.sources import native_bookmark_adapter

        with pytest.raises(MalformedObjectError):
            native_bookmark_adapter().extract(_view(make_obj("docs", spec={"name": "Docs"})))

    @pytest.mark.unit
    def test_instance_from_spec_then_annotation(self):
        from startpage_mcp_tool.sources import native_bookmark_adapter

        adapter = native_bookmark_adapter()
        both = make_obj("a", spec={"url": "u", "instance": "prod"},
                        annotations={"startpunkt.ullberg.us/instance": "dev"})
        annotated = make_obj("b", spec={"url": "u"},
                             annotations={"startpunkt.ullberg.us/instance": "dev"})
        assert adapter.instance_of(_view(both)) == "prod"
        assert adapter.instance_of(_view(annotated)) == "dev"


class TestAnnotatedSources:

    @pytest.mark.unit
    def test_ingress_annotation_overrides(self):
        from startpage_mcp_tool.sources import ingress_adapter

        obj = make_obj("grafana-ingress", namespace="Monitoring", annotations={
            "startpunkt.ullberg.us/appName": "Grafana",
            "startpunkt.ullberg.us/url": "HTTPS://Grafana.Example.com",
            "hajimari.io/icon": "MDI:Chart",
            "startpunkt.ullberg.us/info": "Dashboards",
            "startpunkt.ullberg.us/targetBlank": "true",
            "startpunkt.ullberg.us/location": "0",
            "startpunkt.ullberg.us/enable": "true",
        })
        d = ingress_adapter().extract(_view(obj))
        assert d.name == "grafana"
        assert d.group == "monitoring"
        assert d.url == "https://grafana.example.com"
        assert d.icon == "mdi:chart"
        assert d.info == "Dashboards"
        assert d.target_blank is True
        assert d.location == 1000
        assert d.enabled is True

    @pytest.mark.unit
    def test_ingress_has_no_derived_url(self):
        from startpage_mcp_tool.sources import ingress_adapter

        obj = make_obj("web", spec={"rules": [{"host": "web.example.com"}]})
        d = ingress_adapter().extract(_view(obj))
        assert d.url is None
        assert d.name == "web"
        assert d.group == "default"

    @pytest.mark.unit
    def test_forecastle_expose_enables(self):
        from startpage_mcp_tool.sources import ingress_adapter

        obj = make_obj("web", annotations={"forecastle.stakater.com/expose": "true"})
        assert ingress_adapter().extract(_view(obj)).enabled is True

    @pytest.mark.unit
    def test_app_name_annotation_does_not_enable(self):
        from startpage_mcp_tool.sources import ingress_adapter

        adapter = ingress_adapter()
        d = adapter.extract(_view(make_obj("web", annotations={"startpunkt.ullberg.us/appName": "true"})))
        assert d.enabled is None
        assert not adapter.admits(d)

    @pytest.mark.unit
    def test_opt_in_gate(self):
        from startpage_mcp_tool.models import Descriptor
        from startpage_mcp_tool.sources import ingress_adapter

        gated = ingress_adapter(only_annotated=True)
        open_ = ingress_adapter(only_annotated=False)
        for enabled in (None, False):
            d = Descriptor(name="x", group="g", url="u", enabled=enabled)
            assert not gated.admits(d)
            assert open_.admits(d)
        assert gated.admits(Descriptor(name="x", group="g", enabled=True))

    @pytest.mark.unit
    def test_route_url_with_tls(self):
        from startpage_mcp_tool.sources import openshift_route_adapter

        obj = make_obj("console", spec={"host": "console.apps.example.com", "path": "/ui", "tls": {}})
        assert openshift_route_adapter().extract(_view(obj)).url == "https://console.apps.example.com/ui"

    @pytest.mark.unit
    def test_route_url_defaults(self):
        from startpage_mcp_tool.sources import openshift_route_adapter

        assert openshift_route_adapter().extract(_view(make_obj("r", spec={}))).url == "http://localhost"

    @pytest.mark.unit
    def test_route_structural_url_beats_annotation(self):
        from startpage_mcp_tool.sources import openshift_route_adapter

        obj = make_obj("r", spec={"host": "real.example.com"},
                       annotations={"startpunkt.ullberg.us/url": "http://other"})
        assert openshift_route_adapter().extract(_view(obj)).url == "http://real.example.com"

    @pytest.mark.unit
    def test_virtualservice_url(self):
        from startpage_mcp_tool.sources import istio_virtualservice_adapter

        adapter = istio_virtualservice_adapter(default_protocol="https")
        obj = make_obj("vs", spec={"hosts": ["kiali.example.com", "kiali.internal"]})
        assert adapter.extract(_view(obj)).url == "https://kiali.example.com"

    @pytest.mark.unit
    def test_virtualservice_protocol_annotation_and_empty_hosts(self):
        from startpage_mcp_tool.sources import istio_virtualservice_adapter

        obj = make_obj("vs", spec={"hosts": []},
                       annotations={"startpunkt.ullberg.us/protocol": "https"})
        assert istio_virtualservice_adapter().extract(_view(obj)).url == "https://localhost"

    @pytest.mark.unit
    def test_httproute_reads_hostnames(self):
        from startpage_mcp_tool.sources import gateway_httproute_adapter

        adapter = gateway_httproute_adapter(default_protocol="http")
        obj = make_obj("hr", spec={"hosts": ["wrong.example.com"], "hostnames": ["app.example.com"]},
                       annotations={"startpunkt.ullberg.us/rootPath": "/home"})
        assert adapter.extract(_view(obj)).url == "http://app.example.com/home"

    @pytest.mark.unit
    def test_invalid_location_annotation_is_malformed(self):
        from startpage_mcp_tool.errors import MalformedObjectError
        from startpage_mcp_tool.sources import ingress_adapter

        obj = make_obj("web", annotations={"startpunkt.ullberg.us/location": "top"})
        with pytest.raises(MalformedObjectError):
            ingress_adapter().extract(_view(obj))


class TestInstanceFilter:

    @pytest.mark.unit
    def test_untagged_always_matches(self):
        from startpage_mcp_tool.sources import ingress_adapter

        view = _view(make_obj("web"))
        assert ingress_adapter().matches_instance(view, "prod")

    @pytest.mark.unit
    def test_other_instance_excluded(self):
        from startpage_mcp_tool.sources import ingress_adapter

        adapter = ingress_adapter()
        view = _view(make_obj("web", annotations={"startpunkt.ullberg.us/instance": "dev"}))
        assert not adapter.matches_instance(view, "prod")
        assert adapter.matches_instance(view, "dev")
        assert adapter.matches_instance(view, "")


class TestCollect:

    @pytest.mark.unit
    def test_malformed_object_skipped_individually(self):
        from fakes import fake_api
        from startpage_mcp_tool.config import NamespaceScope
        from startpage_mcp_tool.sources import native_application_adapter

        api = fake_api({("startpunkt.ullberg.us", "applications"): [
            make_obj("good", spec={"name": "good", "url": "http://good"}),
            make_obj("bad", spec={"url": "http://bad"}),
            make_obj("worse", spec={"name": "worse", "url": "u", "location": "nope"}),
        ]})
        result = native_application_adapter().collect(api, NamespaceScope.all())
        assert [d.name for d in result] == ["good"]

    @pytest.mark.unit
    def test_namespace_scope_lists_each_namespace(self):
        from fakes import fake_api
        from startpage_mcp_tool.config import NamespaceScope
        from startpage_mcp_tool.sources import native_application_adapter

        api = fake_api({("startpunkt.ullberg.us", "applications"): [
            make_obj("a", namespace="one", spec={"name": "a", "url": "u"}),
            make_obj("b", namespace="two", spec={"name": "b", "url": "u"}),
            make_obj("c", namespace="three", spec={"name": "c", "url": "u"}),
        ]})
        result = native_application_adapter().collect(api, NamespaceScope.only(["one", "three"]))
        assert sorted(d.name for d in result) == ["a", "c"]
        assert api.list_namespaced_custom_object.call_count == 2
        api.list_cluster_custom_object.assert_not_called()

    @pytest.mark.unit
    def test_ingress_class_filter(self):
        from fakes import fake_api
        from startpage_mcp_tool.config import NamespaceScope
        from startpage_mcp_tool.sources import ingress_adapter

        enabled = {"startpunkt.ullberg.us/enable": "true"}
        api = fake_api({("networking.k8s.io", "ingresses"): [
            make_obj("nginx", spec={"ingressClassName": "nginx"}, annotations=enabled),
            make_obj("traefik", spec={"ingressClassName": "traefik"}, annotations=enabled),
            make_obj("plain", spec={}, annotations=enabled),
        ]})
        keep_plain = ingress_adapter(class_names=["nginx"], include_unclassified=True)
        drop_plain = ingress_adapter(class_names=["nginx"], include_unclassified=False)
        assert sorted(d.name for d in keep_plain.collect(api, NamespaceScope.all())) == ["nginx", "plain"]
        assert [d.name for d in drop_plain.collect(api, NamespaceScope.all())] == ["nginx"]

    @pytest.mark.unit
    def test_query_failure_propagates_from_collect(self):
        from fakes import fake_api, not_found
        from startpage_mcp_tool.config import NamespaceScope
        from startpage_mcp_tool.errors import SourceQueryError
        from startpage_mcp_tool.sources import openshift_route_adapter

        api = fake_api(failures={("route.openshift.io", "routes"): not_found()})
        with pytest.raises(SourceQueryError) as exc_info:
            openshift_route_adapter().collect(api, NamespaceScope.all())
        assert exc_info.value.not_installed
