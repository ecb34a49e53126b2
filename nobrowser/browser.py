"""The headless browser: navigates to pages and submits forms."""
import logging
import os
import tempfile
import weakref
import certifi
import requests
from .errors import ConstructClientError, ResponseBodyDecodeError, SendRequestError
from .page import Page
from .utils import HTTPClient


logger = logging.getLogger(__name__)

# raised by requests while reading the body, which happens before get/post return
DECODE_ERRORS = (requests.exceptions.ContentDecodingError, requests.exceptions.ChunkedEncodingError)


class Browser:
    """A light-weight browser wrapped around an `HTTPClient`.

    Use ``Browser.builder()`` to create one::

        browser = Browser.builder().finish()
        page = browser.navigate_to("https://en.wikipedia.org/")
        form = page.form_by_id("searchform")
        form.input(InputType.SEARCH, "search").set_value("python")
        page = browser.submit_form(form)
    """

    def __init__(self, client, ca_bundle=None):
        self.client = client
        self._ca_bundle = ca_bundle
        self._cleanup = None
        if ca_bundle is not None:
            self._cleanup = weakref.finalize(self, os.unlink, ca_bundle)

    @staticmethod
    def builder():
        return BrowserBuilder()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self.client.close()
        if self._cleanup is not None:
            self._cleanup()
            self._cleanup = None
            self._ca_bundle = None

    def navigate_to(self, url, query=None):
        """GET `url`, appending the ``(key, value)`` pairs in `query` if given."""
        logger.debug("GET %s params=%s", url, query)
        resp = self._send("GET", url, params=query)
        return self._build_page("GET", resp)

    def submit_form(self, form, submit_button_name=None):
        """Submit `form`, optionally via the submit control `submit_button_name`.

        GET forms send their payload as query parameters, POST forms as a
        form-encoded body.
        """
        info = form.submit(submit_button_name)
        logger.debug("%s %s data=%s", info.method, info.url, info.data)
        if info.method == "GET":
            resp = self._send("GET", info.url, params=info.data)
        else:
            resp = self._send("POST", info.url, data=info.data)
        return self._build_page(info.method, resp)

    def _send(self, method, url, **kwargs):
        try:
            if method == "GET":
                return self.client.get(url, **kwargs)
            return self.client.post(url, **kwargs)
        except DECODE_ERRORS as err:
            logger.error("%s %s: cannot decode response body: %s", method, url, err)
            raise ResponseBodyDecodeError(url, err) from err
        except requests.RequestException as err:
            logger.error("%s %s failed: %s", method, url, err)
            raise SendRequestError(method, url, err) from err

    @staticmethod
    def _build_page(method, resp):
        return Page.build(method, resp.url, resp.status_code, resp.headers, resp.text)


class BrowserBuilder:
    """Collects settings for the http client; ``finish()`` returns the Browser."""

    def __init__(self):
        self._cookie_store = True
        self._skip_tls_verify = False
        self._certs = []
        self._timeout = 10
        self._user_agent = None

    def cookie_store(self, cookie_store):
        """Keep cookies between requests. Defaults to True."""
        self._cookie_store = cookie_store
        return self

    def skip_tls_verify(self, skip_tls_verify):
        """Skip verification of server certificates. Defaults to False.

        Prefer `add_cert` for servers signed by a private CA.
        """
        self._skip_tls_verify = skip_tls_verify
        return self

    def add_cert(self, path):
        """Trust the PEM encoded CA certificate(s) in `path` on top of the default bundle."""
        self._certs.append(path)
        return self

    def timeout(self, timeout):
        self._timeout = timeout
        return self

    def user_agent(self, user_agent):
        self._user_agent = user_agent
        return self

    def from_config(self, cfg):
        """Apply settings from a config dict as returned by `config.load_config`."""
        self._cookie_store = cfg.get("cookie_store", self._cookie_store)
        self._skip_tls_verify = cfg.get("skip_tls_verify", self._skip_tls_verify)
        self._certs.extend(cfg.get("certs", []))
        self._timeout = cfg.get("timeout", self._timeout)
        self._user_agent = cfg.get("user_agent", self._user_agent)
        return self

    def finish(self):
        ca_bundle = None
        if self._skip_tls_verify:
            logger.warning("TLS certificate verification is disabled")
            verify = False
        elif self._certs:
            ca_bundle = verify = self._write_ca_bundle()
        else:
            verify = True

        client = HTTPClient(
            timeout=self._timeout,
            cookie_store=self._cookie_store,
            verify=verify,
            user_agent=self._user_agent,
        )
        return Browser(client, ca_bundle=ca_bundle)

    def _write_ca_bundle(self):
        pems = []
        try:
            for path in [certifi.where()] + self._certs:
                with open(path, "r", encoding="utf-8") as fh:
                    pems.append(fh.read().strip())
        except (OSError, UnicodeDecodeError) as err:
            raise ConstructClientError(f"cannot read certificate: {err}") from err

        with tempfile.NamedTemporaryFile("w", suffix=".pem", delete=False, encoding="utf-8") as fh:
            fh.write("\n".join(pems) + "\n")
        logger.debug("Wrote CA bundle with %d extra certificate files to %s", len(self._certs), fh.name)
        return fh.name
