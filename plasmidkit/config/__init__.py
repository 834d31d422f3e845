# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" Manages commandline/runtime options for plasmidkit

    Options are available at any given moment by use of get_config(), this makes
    use of a singleton object. Only the command line layer reads options, the
    parsing and simulation functions take everything they need as arguments.

    For the purposes of testing only, update_config() and destroy_config() are
    provided.

"""


from argparse import Namespace
import threading
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .args import build_parser, PlasmidkitParser
from .loader import load_config_from_file


class Config:  # since it's a glorified namespace, pylint: disable=too-few-public-methods
    """ Keeps options values for plasmidkit.

        Really just the constructor for an internal singleton keeping state
    """
    __singleton = None
    __lock = threading.Lock()

    class _Config:
        """ The real options object.
            Only one of these should exist for the lifetime of a plasmidkit run.
        """
        def __init__(self, indict: Dict[str, Any]) -> None:
            if indict:
                self.__dict__.update(indict)

        def get(self, key: str, default: Any = None) -> Any:
            """ Returns a value for a key if the key exists, otherwise returns
                the default value provided or None """
            return self.__dict__.get(key, default)

        def __getattr__(self, attr: str) -> Any:
            if attr in self.__dict__:
                return self.__dict__[attr]
            raise AttributeError(f"Config has no attribute: {attr}")

        def __setattr__(self, attr: str, value: Any) -> None:
            raise RuntimeError("Config options can't be set directly")

        def __iter__(self) -> Iterator[Tuple[str, Any]]:
            for i in self.__dict__.items():
                yield i

        def __repr__(self) -> str:
            return str(self)

        def __str__(self) -> str:
            return str(dict(self))

        def __len__(self) -> int:
            return len(self.__dict__)

    def __new__(cls, namespace: Union[Namespace, Dict[str, Any]] = None) -> "Config._Config":  # type: ignore
        if namespace is None:
            values: Dict[str, Any] = {}
        elif isinstance(namespace, dict):
            values = namespace
        else:
            values = namespace.__dict__
        with Config.__lock:
            if Config.__singleton is None:
                Config.__singleton = Config._Config(values)
            else:
                Config.__singleton.__dict__.update(values)
        return Config.__singleton


ConfigType = Config._Config  # pylint: disable=protected-access


def update_config(values: Union[Dict[str, Any], Namespace]) -> ConfigType:
    """ Updates the Config singleton with the keys and values provided in the
        given Namespace or dict. Only intended for use in unit testing.
    """
    config = Config(values)
    assert isinstance(config, ConfigType)
    return config


def get_config(no_defaults: bool = False) -> ConfigType:
    """ Returns the current config. If the current config is empty, a default set
        will be created.

        Arguments:
            no_defaults: if True, no defaults will be created in the case of not
                         yet being set

        Returns:
            the current config
    """
    config = Config()
    assert isinstance(config, ConfigType)
    if len(config) < 1 and not no_defaults:
        config = build_config([], defaults_only=True)
    return config


def destroy_config() -> None:
    """ Destroys all settings in the Config singleton. Only intended for use
        with unit testing and when plasmidkit is loaded as a library for multiple
        runs with differing options.
    """
    Config().__dict__.clear()


def build_config(args: List[str], parser: Optional[PlasmidkitParser] = None,
                 defaults_only: bool = False) -> ConfigType:
    """ Builds up a Config. Uses, in order of lowest priority, the default
        config file (plasmidkit/config/default.cfg) and the provided command
        line options. Options not given on the command line don't override
        the defaults.

        Arguments:
            args: the command line arguments to parse
            parser: the parser to use, if not provided a default will be built
            defaults_only: if True, args are ignored and only the defaults loaded

        Returns:
            the updated Config singleton
    """
    default = load_config_from_file()

    if not defaults_only:
        if not parser:
            parser = build_parser(from_config_file=True)
        result = parser.parse_args(args)
        for key, value in result.__dict__.items():
            if value is None and key in default:
                continue
            default.__dict__[key] = value

    config = Config(default)
    assert isinstance(config, ConfigType)
    return config
