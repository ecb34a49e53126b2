"""Parsed html form controls.

An :class:`Input` wraps one ``<input>`` or ``<button>`` element. The kind of
control is stored as an :class:`InputType`; all attributes of the element are
kept so callers can read or tweak them before the form is submitted.
"""
from enum import Enum
from types import MappingProxyType
from .errors import (
    MissingAttributeError,
    UnnamedInputError,
    UnsupportedElementTagError,
    UnsupportedInputTypeError,
)
from .utils import element_attrs


class InputType(Enum):
    """Supported html input kinds.

    File, image and radio inputs are not supported.
    See https://developer.mozilla.org/en-US/docs/Web/HTML/Element/input
    """

    BUTTON = "button"
    CHECKBOX = "checkbox"
    COLOR = "color"
    DATE = "date"
    DATETIME_LOCAL = "datetime-local"
    EMAIL = "email"
    HIDDEN = "hidden"
    MONTH = "month"
    NUMBER = "number"
    PASSWORD = "password"
    RANGE = "range"
    RESET = "reset"
    SEARCH = "search"
    SUBMIT = "submit"
    TEL = "tel"
    TEXT = "text"
    TIME = "time"
    URL = "url"
    WEEK = "week"


INPUT_TYPES = MappingProxyType({t.value: t for t in InputType})

BUTTON_TYPES = MappingProxyType({
    "submit": InputType.SUBMIT,
    "reset": InputType.RESET,
    "button": InputType.BUTTON,
})


class Input:
    """A parsed form control: its type, name, value and raw attributes."""

    def __init__(self, t, name, value=None, attrs=None):
        if not name:
            raise UnnamedInputError()
        self.t = t
        self.name = name
        self.value = value
        self.attrs = dict(attrs or {})

    def __repr__(self):
        return f"Input(t={self.t.value!r}, name={self.name!r}, value={self.value!r})"

    def set_value(self, new_value):
        """Replace the value and return the previous one."""
        prev = self.value
        self.value = new_value
        return prev

    def attr(self, key):
        return self.attrs.get(key)

    def set_attr(self, key, new_value):
        """Set attribute `key` and return its previous value.

        Passing ``None`` removes the attribute, e.g. ``set_attr("checked", None)``
        unchecks a checkbox.
        """
        prev = self.attrs.pop(key, None)
        if new_value is not None:
            self.attrs[key] = new_value
        return prev

    @classmethod
    def parse(cls, element):
        """Build an Input from a BeautifulSoup ``<input>`` or ``<button>`` tag."""
        tag_name = (element.name or "").lower()
        if tag_name == "input":
            t = cls._parse_input_type(element)
        elif tag_name == "button":
            t = cls._parse_button_type(element)
        else:
            raise UnsupportedElementTagError(tag_name)

        attrs = element_attrs(element)
        name = attrs.get("name")
        if not name:
            raise UnnamedInputError()
        return cls(t, name, attrs.get("value"), attrs)

    @staticmethod
    def _parse_input_type(element):
        attr_type = element_attrs(element).get("type")
        if attr_type is None:
            raise MissingAttributeError("type", element.name)
        t = INPUT_TYPES.get(attr_type.lower())
        if t is None:
            raise UnsupportedInputTypeError(attr_type)
        return t

    @staticmethod
    def _parse_button_type(element):
        attr_type = element_attrs(element).get("type")
        if attr_type is None:
            return InputType.SUBMIT
        t = BUTTON_TYPES.get(attr_type.lower())
        if t is None:
            raise UnsupportedInputTypeError(attr_type)
        return t
