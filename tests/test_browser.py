import gc
import os
import tempfile
import threading
import unittest
from http.server import BaseHTTPRequestHandler, HTTPServer
from unittest.mock import patch, Mock
import requests
from nobrowser.browser import Browser
from nobrowser.errors import (
    ConstructClientError,
    InputNotInFormError,
    ResponseBodyDecodeError,
    SendRequestError,
)
from nobrowser.input import InputType


FORM_PAGE = """
<html><body>
    <form id="form" action="{action}" method="{method}">
        <input type="text" name="text" value="">
        <input type="checkbox" name="opt" value="a" checked>
        <input type="checkbox" name="opt" value="b" checked>
        <button type="submit" name="submit" value="submit">SUBMIT</button>
    </form>
</body></html>
"""


def make_response(url, text, status=200, headers=None):
    resp = Mock()
    resp.url = url
    resp.text = text
    resp.status_code = status
    resp.headers = headers or {}
    return resp


class TestBrowserNavigate(unittest.TestCase):

    def setUp(self):
        self.browser = Browser.builder().finish()

    def tearDown(self):
        self.browser.close()

    @patch("nobrowser.utils.requests.Session.get")
    def test_navigate_to_builds_page(self, mock_get):
        mock_get.return_value = make_response(
            "http://localhost:9/final?bla=blub", "<h1>Hi</h1>", headers={"Content-Type": "text/html"})

        page = self.browser.navigate_to("http://localhost:9/", [("bla", "blub")])

        mock_get.assert_called_once_with("http://localhost:9/", params=[("bla", "blub")], headers=None, timeout=10)
        self.assertEqual(page.method, "GET")
        self.assertEqual(page.url, "http://localhost:9/final?bla=blub")
        self.assertEqual(page.status, 200)
        self.assertEqual(page.headers["Content-Type"], "text/html")
        self.assertEqual(page.select_first("h1").get_text(), "Hi")
        self.assertEqual(page.query("bla"), "blub")

    @patch("nobrowser.utils.requests.Session.get")
    def test_navigate_to_without_query(self, mock_get):
        mock_get.return_value = make_response("http://localhost:9/", "")
        self.browser.navigate_to("http://localhost:9/")
        mock_get.assert_called_once_with("http://localhost:9/", params=None, headers=None, timeout=10)

    @patch("nobrowser.utils.requests.Session.get")
    def test_send_error(self, mock_get):
        cause = requests.ConnectionError("connection refused")
        mock_get.side_effect = cause

        with self.assertRaises(SendRequestError) as ctx:
            self.browser.navigate_to("http://localhost:9/")
        self.assertIs(ctx.exception.__cause__, cause)
        self.assertEqual(ctx.exception.method, "GET")
        self.assertEqual(ctx.exception.url, "http://localhost:9/")

    @patch("nobrowser.utils.requests.Session.get")
    def test_decode_error(self, mock_get):
        cause = requests.exceptions.ContentDecodingError("Received response with content-encoding: gzip, but failed to decode it.")
        mock_get.side_effect = cause

        with self.assertRaises(ResponseBodyDecodeError) as ctx:
            self.browser.navigate_to("http://localhost:9/")
        self.assertIs(ctx.exception.__cause__, cause)
        self.assertEqual(ctx.exception.url, "http://localhost:9/")

    @patch("nobrowser.utils.requests.Session.get")
    def test_truncated_chunked_body(self, mock_get):
        mock_get.side_effect = requests.exceptions.ChunkedEncodingError("Connection broken")

        with self.assertRaises(ResponseBodyDecodeError):
            self.browser.navigate_to("http://localhost:9/")


class BrokenGzipHandler(BaseHTTPRequestHandler):

    def do_GET(self):
        body = b"this is not gzip"
        self.send_response(200)
        self.send_header("Content-Type", "text/html")
        self.send_header("Content-Encoding", "gzip")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


class TestBrowserBrokenBody(unittest.TestCase):

    def setUp(self):
        self.server = HTTPServer(("127.0.0.1", 0), BrokenGzipHandler)
        thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        thread.start()
        self.addCleanup(self.server.server_close)
        self.addCleanup(self.server.shutdown)
        self.browser = Browser.builder().finish()
        self.browser.client.session.trust_env = False
        self.addCleanup(self.browser.close)

    def test_invalid_gzip_body(self):
        url = f"http://127.0.0.1:{self.server.server_port}/"
        with self.assertRaises(ResponseBodyDecodeError) as ctx:
            self.browser.navigate_to(url)
        self.assertIsInstance(ctx.exception.__cause__, requests.exceptions.ContentDecodingError)
        self.assertEqual(ctx.exception.url, url)


class TestBrowserSubmit(unittest.TestCase):

    def setUp(self):
        self.browser = Browser.builder().finish()

    def tearDown(self):
        self.browser.close()

    def load_form(self, mock_get, action, method):
        mock_get.return_value = make_response(
            "http://localhost:9/start/page", FORM_PAGE.format(action=action, method=method))
        page = self.browser.navigate_to("http://localhost:9/start/page")
        return page.form(0)

    @patch("nobrowser.utils.requests.Session.get")
    def test_submit_form_via_get(self, mock_get):
        form = self.load_form(mock_get, "/relative/form/submiss.ion", "get")
        form.input(InputType.TEXT, "text").set_value("Testing")
        mock_get.return_value = make_response("http://localhost:9/relative/form/submiss.ion", "done")

        page = self.browser.submit_form(form, "submit")

        mock_get.assert_called_with(
            "http://localhost:9/relative/form/submiss.ion",
            params=[("submit", "submit"), ("text", "Testing"), ("opt", "a"), ("opt", "b")],
            headers=None,
            timeout=10,
        )
        self.assertEqual(page.method, "GET")
        self.assertEqual(page.text, "done")

    @patch("nobrowser.utils.requests.Session.post")
    @patch("nobrowser.utils.requests.Session.get")
    def test_submit_form_via_post(self, mock_get, mock_post):
        form = self.load_form(mock_get, "submiss.ion", "post")
        form.input(InputType.TEXT, "text").set_value("Testing")
        mock_post.return_value = make_response("http://localhost:9/start/submiss.ion", "posted")

        page = self.browser.submit_form(form)

        mock_post.assert_called_once_with(
            "http://localhost:9/start/submiss.ion",
            data=[("text", "Testing"), ("opt", "a"), ("opt", "b")],
            json=None,
            headers=None,
            timeout=10,
        )
        self.assertEqual(page.method, "POST")
        self.assertEqual(page.text, "posted")

    @patch("nobrowser.utils.requests.Session.get")
    def test_submit_with_unknown_button_sends_nothing(self, mock_get):
        form = self.load_form(mock_get, "x", "get")
        mock_get.reset_mock()

        with self.assertRaises(InputNotInFormError):
            self.browser.submit_form(form, "missing")
        mock_get.assert_not_called()

    @patch("nobrowser.utils.requests.Session.post")
    @patch("nobrowser.utils.requests.Session.get")
    def test_submit_send_error(self, mock_get, mock_post):
        form = self.load_form(mock_get, "x", "post")
        mock_post.side_effect = requests.Timeout("too slow")

        with self.assertRaises(SendRequestError) as ctx:
            self.browser.submit_form(form)
        self.assertEqual(ctx.exception.method, "POST")
        self.assertEqual(ctx.exception.url, "http://localhost:9/start/x")

    @patch("nobrowser.utils.requests.Session.post")
    @patch("nobrowser.utils.requests.Session.get")
    def test_submit_decode_error(self, mock_get, mock_post):
        form = self.load_form(mock_get, "x", "post")
        mock_post.side_effect = requests.exceptions.ContentDecodingError("bad deflate data")

        with self.assertRaises(ResponseBodyDecodeError) as ctx:
            self.browser.submit_form(form)
        self.assertEqual(ctx.exception.url, "http://localhost:9/start/x")


class TestBrowserBuilder(unittest.TestCase):

    def write_pem(self):
        with tempfile.NamedTemporaryFile("w", suffix=".pem", delete=False) as fh:
            fh.write("-----BEGIN CERTIFICATE-----\nTESTCERT\n-----END CERTIFICATE-----\n")
        self.addCleanup(os.unlink, fh.name)
        return fh.name

    def test_defaults(self):
        with Browser.builder().finish() as browser:
            self.assertIs(browser.client.session.verify, True)
            self.assertEqual(browser.client.timeout, 10)
            self.assertIsNone(browser.client.session.cookies._policy.allowed_domains())

    def test_cookie_store_disabled(self):
        with Browser.builder().cookie_store(False).finish() as browser:
            self.assertEqual(browser.client.session.cookies._policy.allowed_domains(), ())

    def test_skip_tls_verify(self):
        with Browser.builder().skip_tls_verify(True).finish() as browser:
            self.assertIs(browser.client.session.verify, False)

    def test_timeout_and_user_agent(self):
        with Browser.builder().timeout(3).user_agent("tester/1.0").finish() as browser:
            self.assertEqual(browser.client.timeout, 3)
            self.assertEqual(browser.client.session.headers["User-Agent"], "tester/1.0")

    def test_from_config(self):
        cfg = {"timeout": 5, "cookie_store": False, "skip_tls_verify": True, "certs": [], "user_agent": "cfg/1"}
        with Browser.builder().from_config(cfg).finish() as browser:
            self.assertEqual(browser.client.timeout, 5)
            self.assertIs(browser.client.session.verify, False)
            self.assertEqual(browser.client.session.headers["User-Agent"], "cfg/1")

    def test_add_cert_builds_bundle(self):
        browser = Browser.builder().add_cert(self.write_pem()).finish()
        bundle = browser.client.session.verify
        with open(bundle, encoding="utf-8") as bf:
            self.assertIn("TESTCERT", bf.read())

        browser.close()
        self.assertFalse(os.path.exists(bundle))
        browser.close()

    def test_unclosed_browser_removes_bundle(self):
        browser = Browser.builder().add_cert(self.write_pem()).finish()
        bundle = browser.client.session.verify
        self.assertTrue(os.path.exists(bundle))

        del browser
        gc.collect()
        self.assertFalse(os.path.exists(bundle))

    def test_add_missing_cert(self):
        with self.assertRaises(ConstructClientError):
            Browser.builder().add_cert("/nonexistent/ca.pem").finish()


if __name__ == "__main__":
    unittest.main()
