"""Html forms: parsing, input lookup and submission info."""
import logging
from collections import namedtuple
from urllib.parse import urlsplit
from .errors import InputError, InputNotInFormError, MissingSubmitValueError
from .input import Input, InputType
from .utils import element_attrs, parse_fragment, url_origin


logger = logging.getLogger(__name__)

METHODS = ("GET", "POST")

BUTTONS = frozenset((InputType.BUTTON, InputType.RESET, InputType.SUBMIT))

SubmitFormInfo = namedtuple("SubmitFormInfo", ["url", "method", "data"])


def form_target_url(page_url, action):
    """Resolve a form `action` against the url of the page hosting the form.

    Absolute ``http(s)://`` actions are returned unchanged. An action starting
    with ``/`` replaces the whole page path. Any other action is appended to
    the directory of the page: a path ending in ``/`` is kept as is, otherwise
    its last segment is dropped. Credentials of the page url are kept and the
    port is always spelled out.
    """
    if action.startswith("http://") or action.startswith("https://"):
        return action

    url = url_origin(page_url)
    if not action.startswith("/"):
        path = urlsplit(page_url).path or "/"
        if path.endswith("/"):
            url += path
        else:
            url += "/".join(path.split("/")[:-1]) + "/"
    return url + action


class Form:
    """A parsed html form.

    Inputs are returned as the live objects owned by this form, so changing
    them (``form.input(...).set_value(...)``) changes what gets submitted.
    """

    def __init__(self, page_url, method="GET", action="", id=None, inputs=None):
        self.page_url = page_url
        self.method = method
        self.action = action
        self.id = id
        self.inputs = list(inputs or [])

    def __repr__(self):
        return f"Form(id={self.id!r}, method={self.method!r}, action={self.action!r}, inputs={len(self.inputs)})"

    @classmethod
    def parse(cls, form_element, page_url):
        """Build a Form from a BeautifulSoup ``<form>`` tag.

        Never fails: controls that cannot be parsed are skipped.
        """
        attrs = element_attrs(form_element)
        method = (attrs.get("method") or "GET").upper()
        if method not in METHODS:
            method = "GET"
        action = attrs.get("action") or ""
        inputs = cls._parse_inputs(form_element)
        return cls(page_url, method=method, action=action, id=attrs.get("id"), inputs=inputs)

    @staticmethod
    def _parse_inputs(form_element):
        fragment = parse_fragment(form_element.decode_contents())
        inputs = []
        # all <input> controls first, then all <button> controls
        for selector in ("input", "button"):
            for element in fragment.select(selector):
                try:
                    inputs.append(Input.parse(element))
                except InputError as err:
                    logger.debug("Dropping form control: %s", err)
        return inputs

    def input_handle(self, t, name):
        """Return the index of the first input of type `t` named `name`."""
        for idx, inp in enumerate(self.inputs):
            if inp.t == t and inp.name == name:
                return idx
        raise InputNotInFormError(name, t)

    def input(self, t, name):
        """Return the first input of type `t` named `name`."""
        return self.inputs[self.input_handle(t, name)]

    def input_at(self, handle):
        if handle < 0 or handle >= len(self.inputs):
            raise IndexError(f"input handle {handle} is out of range for {len(self.inputs)} inputs")
        return self.inputs[handle]

    def mutate(self, handle, fn):
        """Call ``fn(input)`` on the input behind `handle` and return its result."""
        return fn(self.input_at(handle))

    def target_url(self):
        return form_target_url(self.page_url, self.action)

    def submit(self, submit_button_name=None):
        """Compile url, method and ordered payload for submitting this form.

        Only the submit control named `submit_button_name` is sent; other
        buttons, inputs without a value and unchecked checkboxes are skipped.
        Repeated names stay separate entries.
        """
        data = []

        if submit_button_name is not None:
            button = self.input(InputType.SUBMIT, submit_button_name)
            if button.value is None:
                raise MissingSubmitValueError(submit_button_name)
            data.append((button.name, button.value))

        for inp in self.inputs:
            if inp.t in BUTTONS:
                continue
            if inp.value is None:
                continue
            if inp.t == InputType.CHECKBOX and inp.attr("checked") is None:
                continue
            data.append((inp.name, inp.value))

        return SubmitFormInfo(self.target_url(), self.method, data)
