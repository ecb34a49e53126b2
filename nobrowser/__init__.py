"""nobrowser - a light-weight, head-less "web browser" built on requests.

Pages are fetched with requests and parsed with BeautifulSoup; elements are
found with CSS selectors and html forms can be filled out and submitted.
There is no JavaScript and no rendering.
"""
__version__ = "0.1.0"

from .browser import Browser, BrowserBuilder
from .errors import NoBrowserError
from .form import Form, SubmitFormInfo, form_target_url
from .input import Input, InputType
from .page import Page

__all__ = [
    "Browser",
    "BrowserBuilder",
    "Form",
    "Input",
    "InputType",
    "NoBrowserError",
    "Page",
    "SubmitFormInfo",
    "form_target_url",
]
