# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

"""Configuration file handling for plasmidkit

"""
import configparser
import os

from argparse import Namespace
from typing import Any

from plasmidkit.common import path

_DEFAULT_NAME = 'default.cfg'
_BASEDIR = path.get_full_path(__file__)
# options that are always lists, even with a single value
_LIST_OPTIONS = {"enzymes"}


def _convert_value(config: configparser.ConfigParser, section: str, key: str, value: str) -> Any:
    """ Converts a raw value to an integer or boolean where possible, and comma
        separated values into lists
    """
    if key in _LIST_OPTIONS:
        return [part.strip() for part in value.split(",") if part.strip()]
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return config.getboolean(section, key)
    except ValueError:
        pass
    if "," in value:
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


def load_config_from_file(default_file: str = "") -> Namespace:
    """ Load config from default config.

        Arguments:
            default_file: the path to the default config file, if not provided
                          an embedded version will be used

        Returns:
            a Namespace mapping option name to option value
    """
    namespace = Namespace()
    default_file = default_file or os.path.join(_BASEDIR, _DEFAULT_NAME)
    config = configparser.ConfigParser()
    with open(default_file, "r", encoding="utf-8") as handle:
        config.read_file(handle)

    for section in config.sections():
        if section not in namespace:
            namespace.__dict__[section] = Namespace()
        for key, value in config.items(section):
            key = key.replace('-', '_')
            if key not in namespace.__dict__[section]:
                namespace.__dict__[section].__dict__[key] = _convert_value(config, section, key, value)

    # settings from the [DEFAULT] section go to the global namespace
    for key, value in config.items('DEFAULT'):
        key = key.replace('-', '_')
        if key not in namespace:
            namespace.__dict__[key] = _convert_value(config, 'DEFAULT', key, value)

    return namespace
