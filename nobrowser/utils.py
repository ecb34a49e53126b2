"""Utility helpers for HTTP operations, HTML parsing and URL handling."""
from http.cookiejar import DefaultCookiePolicy
from urllib.parse import urlsplit
import requests
from bs4 import BeautifulSoup


HTML_PARSER = "html.parser"

DEFAULT_PORTS = {"http": 80, "https": 443}


class HTTPClient:
    """Simple HTTP client wrapper around requests.Session.

    Provides `get` and `post` helpers that return the underlying
    `requests.Response` object. Redirects are followed by requests itself.
    """

    def __init__(self, timeout=10, cookie_store=True, verify=True, user_agent=None):
        self.session = requests.Session()
        self.session.verify = verify
        self.timeout = timeout
        if not cookie_store:
            # refuse to store or send any cookie
            self.session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
        if user_agent:
            self.session.headers["User-Agent"] = user_agent

    def get(self, url, params=None, headers=None):
        """Perform an HTTP GET and return the Response."""
        return self.session.get(url, params=params, headers=headers, timeout=self.timeout)

    def post(self, url, data=None, json=None, headers=None):
        """Perform an HTTP POST and return the Response."""
        return self.session.post(url, data=data, json=json, headers=headers, timeout=self.timeout)

    def close(self):
        self.session.close()


def parse_html(text):
    """Parse a full html document.

    Multi-valued attributes such as ``class`` are kept as plain strings so
    every attribute reads back exactly as it appeared in the markup.
    """
    return BeautifulSoup(text or "", HTML_PARSER, multi_valued_attributes=None)


def parse_fragment(text):
    """Parse a detached piece of markup, e.g. the inner html of a form."""
    return BeautifulSoup(text or "", HTML_PARSER, multi_valued_attributes=None)


def element_attrs(element):
    """Return the attributes of a tag as a plain ``str -> str`` dict."""
    attrs = {}
    for key, value in element.attrs.items():
        if isinstance(value, list):
            value = " ".join(value)
        attrs[key] = value
    return attrs


def url_origin(url):
    """Return ``scheme://[user[:pass]@]host:port`` for `url`.

    The port is always explicit, falling back to the scheme's default port.
    """
    parts = urlsplit(url)
    creds = ""
    if parts.username is not None:
        creds = parts.username
        if parts.password is not None:
            creds += ":" + parts.password
        creds += "@"

    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"

    port = parts.port if parts.port is not None else DEFAULT_PORTS.get(parts.scheme)
    origin = f"{parts.scheme}://{creds}{host}"
    if port is not None:
        origin += f":{port}"
    return origin
