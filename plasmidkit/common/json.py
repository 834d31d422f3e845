# License: GNU Affero General Public License v3 or later
# A copy of GNU AGPL v3 should have been included in this software package in LICENSE.txt.

""" JSON conversion helpers, backed by orjson, for records and annotations
"""

from json import JSONDecodeError  # pylint: disable=unused-import  # for compatibility
from typing import Any, Callable, Dict, IO, List, Union

# pylint doesn't recognise any members of orjson, where mypy and pyflakes do
# pylint: disable=no-name-in-module
from orjson import (
    loads,
    OPT_NON_STR_KEYS as _OPT_CONVERT_NON_STR_KEYS,
    OPT_SORT_KEYS as _OPT_SORT_KEYS,
    OPT_INDENT_2 as _OPT_INDENT_2,
    dumps as _dumps,
)
# pylint: enable=no-name-in-module

from .model import DNASequence


def _base_convertor(obj: Any) -> Any:
    # handles any conversion methods for classes that aren't default types or dataclasses
    if hasattr(obj, "to_json"):
        return obj.to_json()
    raise TypeError


def _convert_std_to_orjson(*, sort_keys: bool = False, option: int = 0, indent: bool = True) -> int:
    # always match stdlib JSON's default behaviour, where non-string keys are converted to string
    option |= _OPT_CONVERT_NON_STR_KEYS
    if sort_keys:
        option |= _OPT_SORT_KEYS
    if indent:
        option |= _OPT_INDENT_2
    return option


def dumps(obj: Any, *, default: Callable[[Any], Any] = _base_convertor, indent: bool = False,
          sort_keys: bool = False, option: int = 0,
          ) -> str:
    """ Converts the given object to a JSON string

        Objects with a to_json() method are converted using that method,
        records are therefore converted by their own rules rather than as
        plain dataclasses.

        Arguments:
            obj: the object to convert
            default: an optional override of the usual class convertor handler for non-standard types
            indent: a boolean indicating whether to use indents in the string conversion (always 2 spaces if used)
            sort_keys: whether the child attributes should be sorted by key
            option: an orjson option value (see orjson documentation for possible values)

        Returns:
            the string generated
    """
    if hasattr(obj, "to_json"):
        obj = obj.to_json()
    option = _convert_std_to_orjson(indent=indent, sort_keys=sort_keys, option=option)
    return _dumps(obj, default=default, option=option).decode()


def dump(obj: Any, handle: IO, *, indent: bool = False, sort_keys: bool = False) -> None:
    """ Converts the given object to JSON and writes the resulting string to the given file handle

        Arguments:
            obj: the object to convert
            handle: the file object to write to
            indent: a boolean indicating whether to use indents in the string conversion
            sort_keys: whether the child attributes should be sorted by key

        Returns:
            None
    """
    handle.write(dumps(obj, indent=indent, sort_keys=sort_keys))


def load(handle: IO) -> Union[Dict[str, Any], List[Any]]:
    """ Reads in JSON text from the given file handle and returns the information using
        standard types.
    """
    return loads(handle.read())


def records_to_json(records: List[DNASequence], indent: bool = True) -> str:
    """ Converts multiple records to a JSON array """
    return dumps([record.to_json() for record in records], indent=indent)


def record_from_json(text: Union[str, bytes]) -> DNASequence:
    """ Rebuilds a single record from JSON text as generated by dumps() """
    data = loads(text)
    if not isinstance(data, dict):
        raise ValueError("JSON content is not a single record")
    return DNASequence.from_json(data)


def records_from_json(text: Union[str, bytes]) -> List[DNASequence]:
    """ Rebuilds records from JSON text containing either a single record or
        an array of records
    """
    data = loads(text)
    if isinstance(data, dict):
        data = [data]
    return [DNASequence.from_json(item) for item in data]
