import base64
import json
import unittest
from unittest.mock import patch

import requests

from edgetools.config import Settings
from edgetools.main import build_tool_registry
from edgetools.services.crawler import Crawler
from edgetools.services.gateway import ToolGateway, best_effort_message
from edgetools.services.upstream_client import UpstreamError
from edgetools.tools.base import ResourceContent, TextContent, Tool, ToolName, ToolResult
from edgetools.tools.registry import FieldSpec, ToolRegistry


def _settings(**overrides) -> Settings:
    values = dict(
        cloudflare_account_id="acct-1",
        cloudflare_email="ops@example.test",
        cloudflare_api_key="secret-key",
        cloudflare_namespace_id="ns-default",
        cloudflare_api_base_url="https://api.example.test/client/v4",
        r2_bucket_name="uploads",
        r2_public_url="https://pub.example.test",
        tts_model="@cf/myshell-ai/melotts",
        summarize_model="@cf/facebook/bart-large-cnn",
        summarize_max_tokens=100,
        upstream_timeout_seconds=30,
        scrape_timeout_seconds=10,
        default_audio_mime_type="audio/mp3",
        log_level="INFO",
    )
    values.update(overrides)
    return Settings(**values)


class _FakeResponse:
    def __init__(self, status_code, payload=None, text="", reason=""):
        self.status_code = status_code
        self.reason = reason
        self._payload = payload
        self.headers = {"Content-Type": "application/json" if payload is not None else "text/plain"}
        self.text = text if payload is None else json.dumps(payload)

    def json(self):
        return self._payload


def _gateway(**overrides) -> ToolGateway:
    return ToolGateway(tool_registry=build_tool_registry(_settings(**overrides)))


def _texts(result: ToolResult) -> list[str]:
    return [item.text for item in result.content if isinstance(item, TextContent)]


class _ExplodingTool(Tool):
    name = ToolName.SUMMARIZE_TEXT

    def __init__(self, exc: Exception) -> None:
        self._exc = exc

    def run(self, args):
        raise self._exc


class ToolGatewayValidationTests(unittest.TestCase):
    def test_missing_required_field_returns_error_text(self):
        result = _gateway().invoke("summarizeText", {})
        self.assertEqual(len(result.content), 1)
        self.assertEqual(_texts(result), ["Error: text is required"])

    def test_type_mismatch_returns_error_text(self):
        result = _gateway().invoke("scrapeUrlAndSublinks", {"url": 5})
        self.assertEqual(_texts(result), ["Error: url must be a string"])

    def test_non_object_arguments(self):
        result = _gateway().invoke("getFromCloudflareKV", "key")
        self.assertEqual(_texts(result), ["Error: arguments must be an object"])

    def test_unknown_tool(self):
        result = _gateway().invoke("deleteEverything", {})
        self.assertEqual(_texts(result), ["Error: tool 'deleteEverything' is not registered"])

    def test_optional_fields_receive_defaults(self):
        audio = base64.b64encode(b"ID3\x03audio").decode("ascii")
        with patch(
            "edgetools.services.upstream_client.requests.request",
            return_value=_FakeResponse(200, {"result": {"audio": audio}}),
        ) as mocked:
            result = _gateway().invoke("fetchAudioAndSave", {})

        self.assertEqual(mocked.call_args.kwargs["json"], {"prompt": "", "lang": "en"})
        self.assertEqual(len(result.content), 2)


class ToolGatewayFailureTests(unittest.TestCase):
    def _single_tool_gateway(self, exc: Exception) -> ToolGateway:
        registry = ToolRegistry()
        registry.register(
            tool=_ExplodingTool(exc),
            label="Boom",
            description="Always fails.",
            fields={"text": FieldSpec(type="string")},
        )
        return ToolGateway(tool_registry=registry)

    def test_handler_exception_becomes_error_text(self):
        result = self._single_tool_gateway(RuntimeError("parse failure")).invoke(
            "summarizeText", {"text": "x"}
        )
        self.assertEqual(_texts(result), ["Error: parse failure"])

    def test_provider_message_is_preferred(self):
        exc = UpstreamError("Request failed: 400 - Bad Request", status_code=400, provider_message="Invalid input")
        self.assertEqual(best_effort_message(exc), "Invalid input")
        result = self._single_tool_gateway(exc).invoke("summarizeText", {"text": "x"})
        self.assertEqual(_texts(result), ["Error: Invalid input"])

    def test_empty_exception_message_uses_class_name(self):
        self.assertEqual(best_effort_message(KeyError()), "KeyError")

    def test_upstream_500_becomes_error(self):
        with patch(
            "edgetools.services.upstream_client.requests.request",
            return_value=_FakeResponse(500, text="boom", reason="Internal Server Error"),
        ):
            result = _gateway().invoke("summarizeText", {"text": "long text"})
        self.assertEqual(_texts(result), ["Error: Request failed: 500 - Internal Server Error"])

    def test_network_failure_becomes_error(self):
        with patch(
            "edgetools.services.upstream_client.requests.request",
            side_effect=requests.Timeout("read timed out"),
        ):
            result = _gateway().invoke("summarizeText", {"text": "long text"})
        self.assertEqual(_texts(result), ["Error: read timed out"])

    def test_missing_credentials_become_error(self):
        result = _gateway(cloudflare_api_key=None).invoke("summarizeText", {"text": "x"})
        self.assertEqual(_texts(result), ["Error: Cloudflare credentials are not configured."])


class KvLookupGatewayTests(unittest.TestCase):
    def test_404_is_reported_as_not_found(self):
        with patch(
            "edgetools.services.upstream_client.requests.request",
            return_value=_FakeResponse(404, reason="Not Found"),
        ) as mocked:
            result = _gateway().invoke("getFromCloudflareKV", {"key": "missing-key"})

        self.assertEqual(
            _texts(result), ["Key 'missing-key' not found in Cloudflare KV namespace."]
        )
        self.assertEqual(
            mocked.call_args.args[1],
            "https://api.example.test/client/v4/accounts/acct-1/storage/kv/namespaces/ns-default/values/missing-key",
        )

    def test_500_is_reported_as_error(self):
        with patch(
            "edgetools.services.upstream_client.requests.request",
            return_value=_FakeResponse(500, reason="Internal Server Error"),
        ):
            result = _gateway().invoke("getFromCloudflareKV", {"key": "missing-key"})
        self.assertIn("Error", _texts(result)[0])
        self.assertNotIn("not found", _texts(result)[0])

    def test_value_is_returned_with_resource(self):
        with patch(
            "edgetools.services.upstream_client.requests.request",
            return_value=_FakeResponse(200, text="hello world"),
        ) as mocked:
            result = _gateway().invoke(
                "getFromCloudflareKV", {"key": "greeting/en", "namespaceId": "ns-2"}
            )

        self.assertTrue(mocked.call_args.args[1].endswith("/namespaces/ns-2/values/greeting%2Fen"))
        self.assertEqual(
            _texts(result),
            ["Successfully retrieved value from Cloudflare KV.\nKey: greeting/en\nValue: hello world"],
        )
        resource = result.content[1].resource
        self.assertEqual(resource.uri, "kv://ns-2/greeting/en")
        self.assertEqual(resource.text, "hello world")
        self.assertEqual(resource.mime_type, "text/plain")

    def test_namespace_is_encoded_as_one_segment(self):
        with patch(
            "edgetools.services.upstream_client.requests.request",
            return_value=_FakeResponse(404, reason="Not Found"),
        ) as mocked:
            _gateway().invoke("getFromCloudflareKV", {"key": "k", "namespaceId": "ns/../../zones"})
        self.assertIn("/namespaces/ns%2F..%2F..%2Fzones/values/k", mocked.call_args.args[1])

    def test_dot_segments_are_rejected_without_request(self):
        for args in ({"key": "k", "namespaceId": ".."}, {"key": ".."}, {"key": "."}):
            with patch("edgetools.services.upstream_client.requests.request") as mocked:
                result = _gateway().invoke("getFromCloudflareKV", args)
            mocked.assert_not_called()
            self.assertTrue(_texts(result)[0].startswith("Error: "), args)

    def test_missing_namespace_is_an_error(self):
        result = _gateway(cloudflare_namespace_id=None).invoke("getFromCloudflareKV", {"key": "k"})
        self.assertTrue(_texts(result)[0].startswith("Error: namespaceId is required"))


class UploadGatewayTests(unittest.TestCase):
    def test_traversing_file_name_is_rejected_without_request(self):
        with patch("edgetools.services.upstream_client.requests.request") as mocked:
            result = _gateway().invoke(
                "uploadAudioToR2", {"fileData": "AAAA", "fileName": "../../../../../zones/x"}
            )
        mocked.assert_not_called()
        self.assertEqual(
            _texts(result),
            ["Error: fileName has an invalid path segment: '../../../../../zones/x'"],
        )

    def test_upload_stays_under_bucket_objects(self):
        with patch(
            "edgetools.services.upstream_client.requests.request",
            return_value=_FakeResponse(200, text=""),
        ) as mocked:
            _gateway().invoke("uploadAudioToR2", {"fileData": "AAAA", "fileName": "a/b.mp3"})
        self.assertEqual(
            mocked.call_args.args[1],
            "https://api.example.test/client/v4/accounts/acct-1/r2/buckets/uploads/objects/a/b.mp3",
        )


class ScrapeGatewayTests(unittest.TestCase):
    def test_seven_anchor_page_yields_five_absolute_links(self):
        root = "https://example.test/"
        anchors = "".join(f'<a href="/p{i}">p{i}</a>' for i in range(7))

        def fake_fetch(self, url):
            if url == root:
                return f"<html><body><p>Home</p>{anchors}</body></html>"
            return f"<html><body>{url}</body></html>"

        with patch.object(Crawler, "_fetch_html", fake_fetch):
            result = _gateway().invoke("scrapeUrlAndSublinks", {"url": root})

        self.assertEqual(_texts(result), ["Scraped https://example.test/: 5 sublinks (0 failed)"])
        resource = result.content[1]
        self.assertIsInstance(resource, ResourceContent)
        self.assertEqual(resource.resource.uri, root)
        payload = json.loads(resource.resource.text)
        self.assertEqual(payload["main_url"], root)
        self.assertEqual(len(payload["sublinks"]), 5)
        for key in payload["sublinks"]:
            self.assertTrue(key.startswith("https://example.test/p"))

    def test_root_failure_becomes_error(self):
        def fake_fetch(self, url):
            raise RuntimeError("Request failed: 503 - Service Unavailable")

        with patch.object(Crawler, "_fetch_html", fake_fetch):
            result = _gateway().invoke("scrapeUrlAndSublinks", {"url": "https://down.test/"})
        self.assertEqual(_texts(result), ["Error: Request failed: 503 - Service Unavailable"])


if __name__ == "__main__":
    unittest.main()
