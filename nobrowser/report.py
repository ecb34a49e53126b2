"""Reporting utilities: describe a loaded page and its forms as JSON."""
import json


def input_report(inp):
    return {"type": inp.t.value, "name": inp.name, "value": inp.value, "attrs": dict(inp.attrs)}


def form_report(form):
    return {
        "id": form.id,
        "method": form.method,
        "action": form.action,
        "target": form.target_url(),
        "inputs": [input_report(i) for i in form.inputs],
    }


def page_report(page):
    """Return a JSON-serializable dict describing `page`."""
    return {
        "url": page.url,
        "method": page.method,
        "status": page.status,
        "headers": dict(page.headers),
        "forms": [form_report(f) for f in page.forms],
    }


def to_json(report, path=None):
    s = json.dumps(report, indent=2, ensure_ascii=False)
    if path:
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(s)
    return s
