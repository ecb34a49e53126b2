"""A loaded web page: response meta data, parsed html and forms."""
import logging
from urllib.parse import parse_qsl, urlsplit
from soupsieve import SelectorSyntaxError
from .errors import (
    CssSelectorParseError,
    CssSelectorResultEmptyError,
    FormIdNotFoundError,
    FormIndexOutOfBoundsError,
    UnknownQueryParamError,
)
from .form import Form
from .utils import parse_html


logger = logging.getLogger(__name__)


class Page:
    """A decoded http response.

    Gives access to the http method used to fetch the page, the final url
    (after redirects), status code, headers and raw text, plus the parsed
    document via CSS selectors (`select`, `select_first`) and the forms found
    on it (`form`, `form_by_id`).
    """

    def __init__(self, method, url, status, headers, text, html, forms):
        self.method = method
        self.url = url
        self.status = status
        self.headers = headers
        self.text = text
        self.html = html
        self.forms = forms

    def __repr__(self):
        return f"Page(method={self.method!r}, url={self.url!r}, status={self.status!r}, forms={len(self.forms)})"

    @classmethod
    def build(cls, method, url, status, headers, text):
        html = parse_html(text)
        forms = [Form.parse(form, url) for form in html.select("form")]
        logger.debug("Built page %s (status %s) with %d forms", url, status, len(forms))
        return cls(method, url, status, headers, text, html, forms)

    def form(self, idx):
        """Return the form at index `idx`, counting in document order."""
        if idx < 0 or idx >= len(self.forms):
            raise FormIndexOutOfBoundsError(len(self.forms), idx)
        return self.forms[idx]

    def form_by_id(self, id):
        for form in self.forms:
            if form.id is not None and form.id == id:
                return form
        raise FormIdNotFoundError(id)

    def _select(self, selectors):
        try:
            return self.html.select(selectors)
        except SelectorSyntaxError as err:
            raise CssSelectorParseError(selectors, str(err)) from err

    def select(self, selectors):
        """Return all elements matching a CSS selector group (maybe none)."""
        return self._select(selectors)

    def select_first(self, selectors):
        """Return the first element matching a CSS selector group."""
        matches = self._select(selectors)
        if not matches:
            raise CssSelectorResultEmptyError(selectors)
        return matches[0]

    def query(self, name):
        """Return the value of query parameter `name` of this page's url.

        If the parameter is repeated only the first value is returned.
        """
        query = urlsplit(self.url).query
        for key, value in parse_qsl(query, keep_blank_values=True):
            if key == name:
                return value
        raise UnknownQueryParamError(query, name)
