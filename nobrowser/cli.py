"""CLI entrypoint: load a page, optionally fill and submit one of its forms."""
import argparse
import sys
from .browser import Browser
from .config import load_config
from .errors import NoBrowserError
from .input import InputType
from .logging import setup_logging
from .report import page_report, to_json


def _pair(text):
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got '{text}'")
    return key, value


def _field(text):
    target, value = _pair(text)
    kind, sep, name = target.partition(":")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected TYPE:NAME=VALUE, got '{text}'")
    try:
        t = InputType(kind.lower())
    except ValueError:
        raise argparse.ArgumentTypeError(f"unsupported input type '{kind}'") from None
    return t, name, value


def build_parser():
    parser = argparse.ArgumentParser(prog="nobrowser", description="nobrowser - a head-less web browser")
    parser.add_argument("url", help="URL to load")
    parser.add_argument("-q", "--query", action="append", type=_pair, default=[], metavar="KEY=VALUE",
                        help="Query parameter to append to the URL")
    which = parser.add_mutually_exclusive_group()
    which.add_argument("--form", type=int, help="Index of the form to fill in")
    which.add_argument("--form-id", help="Id of the form to fill in")
    parser.add_argument("--set", dest="fields", action="append", type=_field, default=[],
                        metavar="TYPE:NAME=VALUE", help="Set the value of a form input")
    parser.add_argument("--check", action="append", default=[], metavar="NAME", help="Check a checkbox")
    parser.add_argument("--uncheck", action="append", default=[], metavar="NAME", help="Uncheck a checkbox")
    parser.add_argument("--submit", metavar="NAME", help="Name of the submit button to use")
    parser.add_argument("-j", "--json", dest="json_path", help="Write JSON report to file")
    parser.add_argument("-k", "--insecure", action="store_true", help="Skip TLS certificate verification")
    parser.add_argument("-c", "--config", help="Path to a JSON config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def fill_form(form, args):
    for t, name, value in args.fields:
        form.input(t, name).set_value(value)
    for name in args.check:
        form.input(InputType.CHECKBOX, name).set_attr("checked", "")
    for name in args.uncheck:
        form.input(InputType.CHECKBOX, name).set_attr("checked", None)


def run(args):
    cfg = load_config(args.config)
    builder = Browser.builder().from_config(cfg)
    if args.insecure:
        builder.skip_tls_verify(True)

    with builder.finish() as browser:
        page = browser.navigate_to(args.url, args.query or None)
        wants_form = args.form is not None or args.form_id is not None
        if wants_form or args.fields or args.check or args.uncheck or args.submit:
            form = page.form_by_id(args.form_id) if args.form_id is not None else page.form(args.form or 0)
            fill_form(form, args)
            page = browser.submit_form(form, args.submit)
        return page_report(page)


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else "WARNING")

    try:
        report = run(args)
    except NoBrowserError as err:
        print(f"error: {err}", file=sys.stderr)
        return 1

    s = to_json(report, path=args.json_path)
    if args.json_path:
        print(f"Wrote JSON report to {args.json_path}")
    else:
        print(s)
    return 0


if __name__ == "__main__":
    sys.exit(main())
