"""Configuration handling for the browser."""
import json
import logging
import os
from . import __version__


logger = logging.getLogger(__name__)

DEFAULTS = {
    "timeout": 10,
    "cookie_store": True,
    "skip_tls_verify": False,
    "certs": [],
    "user_agent": f"nobrowser/{__version__}",
}


def load_config(path=None):
    """Load `config.json` from project root by default.

    Returns a dict of settings merged over `DEFAULTS`. If the file is missing
    or unreadable, returns the defaults.
    """
    if path is None:
        path = os.path.join(os.path.dirname(os.path.dirname(__file__)), "config.json")
    cfg = dict(DEFAULTS, certs=[])
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        logger.debug("No config file at %s, using defaults", path)
        return cfg
    except (OSError, ValueError) as err:
        logger.warning("Ignoring config file %s: %s", path, err)
        return cfg
    if isinstance(data, dict):
        cfg.update(data)
    else:
        logger.warning("Ignoring config file %s: expected a JSON object", path)
    return cfg


def get_config():
    return load_config()
