"""Exceptions raised while parsing pages and forms or talking to servers."""


class NoBrowserError(Exception):
    """Base class for every error raised by nobrowser."""


class InputError(NoBrowserError):
    """An input element could not be parsed."""


class UnnamedInputError(InputError):
    def __init__(self):
        super().__init__("Unnamed inputs are not supported!")


class UnsupportedElementTagError(InputError):
    def __init__(self, element_tag):
        self.element_tag = element_tag
        super().__init__(f"Html tag '{element_tag}' cannot be parsed to an input!")


class UnsupportedInputTypeError(InputError):
    def __init__(self, attr_type):
        self.attr_type = attr_type
        super().__init__(f"Input tag with attribute 'type={attr_type}' cannot be parsed to an input!")


class MissingAttributeError(InputError):
    def __init__(self, attribute, element_tag):
        self.attribute = attribute
        self.element_tag = element_tag
        super().__init__(f"Missing attribute '{attribute}' on html tag '{element_tag}'!")


class FormError(NoBrowserError):
    """A form lookup or submission failed."""


class InputNotInFormError(FormError):
    def __init__(self, input_name, input_type):
        self.input_name = input_name
        self.input_type = input_type
        super().__init__(f"Form doesn't contain input named '{input_name}' of type '{input_type.value}'!")


class MissingSubmitValueError(FormError):
    def __init__(self, input_name):
        self.input_name = input_name
        super().__init__(f"Submit control '{input_name}' has no value to submit!")


class PageError(NoBrowserError):
    """A lookup on a loaded page failed."""


class UnknownQueryParamError(PageError):
    def __init__(self, query, param):
        self.query = query
        self.param = param
        super().__init__(f"Query param '{param}' is not defined in query string '{query}'!")


class CssSelectorParseError(PageError):
    def __init__(self, selector, reason):
        self.selector = selector
        self.reason = reason
        super().__init__(f"Failed to parse CSS selector '{selector}', reason: {reason}")


class CssSelectorResultEmptyError(PageError):
    def __init__(self, selector):
        self.selector = selector
        super().__init__(f"CSS selector '{selector}' matched no elements.")


class FormIndexOutOfBoundsError(PageError):
    def __init__(self, num_forms, idx):
        self.num_forms = num_forms
        self.idx = idx
        super().__init__(f"This page contains {num_forms} forms; index {idx} is out of bounds!")


class FormIdNotFoundError(PageError):
    def __init__(self, id):
        self.id = id
        super().__init__(f"This page contains no form with id '{id}'!")


class BrowserError(NoBrowserError):
    """The http client could not be built or a request failed."""


class ConstructClientError(BrowserError):
    def __init__(self, reason):
        self.reason = reason
        super().__init__(f"Failed to construct the http client: {reason}")


class SendRequestError(BrowserError):
    def __init__(self, method, url, reason):
        self.method = method
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to send {method} request to '{url}': {reason}")


class ResponseBodyDecodeError(BrowserError):
    def __init__(self, url, reason):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to decode response body from '{url}': {reason}")
