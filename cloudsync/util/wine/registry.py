"""Reading of the text registry files Wine keeps at the root of a prefix"""
import re
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, List

from cloudsync.util.log import logger

(
    REG_NONE,
    REG_SZ,
    REG_EXPAND_SZ,
    REG_BINARY,
    REG_DWORD,
    REG_DWORD_BIG_ENDIAN,
    REG_LINK,
    REG_MULTI_SZ,
) = range(8)

DATA_TYPES = {
    '"': REG_SZ,
    'str:"': REG_SZ,
    'str(2):"': REG_EXPAND_SZ,
    'str(7):"': REG_MULTI_SZ,
    "hex": REG_BINARY,
    "dword": REG_DWORD,
}


@dataclass
class RegistryEntry:
    """A registry key with its decoded values.

    Attributes:
        path: Key path, using '/' between components (e.g. 'Software/Wine')
        values: Value names mapped to their decoded string data
    """

    path: str
    values: Dict[str, str] = field(default_factory=dict)


ESCAPE_SEQUENCES = {"n": "\n", "r": "\r", "t": "\t", "0": "\0"}


def unescape_value(value: str) -> str:
    """Decode the escape sequences Wine uses inside quoted strings"""
    return re.sub(r"\\(.)", lambda match: ESCAPE_SEQUENCES.get(match.group(1), match.group(1)), value)


def get_data_type(value: str) -> int:
    for prefix, data_type in DATA_TYPES.items():
        if value.startswith(prefix):
            return data_type
    return REG_NONE


def decode_value(value: str) -> str:
    """Return the data of a raw registry value as a plain string"""
    data_type = get_data_type(value)
    if data_type in (REG_SZ, REG_EXPAND_SZ, REG_MULTI_SZ) and value.endswith('"'):
        return unescape_value(value[value.index('"') + 1:-1])
    if data_type == REG_DWORD:
        try:
            return str(int(value[len("dword:"):], 16))
        except ValueError:
            logger.warning("Invalid dword value %s", value)
    return value

class WineRegistry:
    """Keys of a registry file, in file order"""

    def __init__(self):
        self.keys = OrderedDict()

    def parse_lines(self, registry_lines):
        current_key = None
        add_next_to_value = False
        additional_values = []
        for line in registry_lines:
            line = line.rstrip("\r\n")

            if line.startswith("["):
                if additional_values:
                    current_key.add_to_last("\n".join(additional_values))
                    additional_values = []
                current_key = WineRegistryKey(key_def=line)
                self.keys[current_key.name] = current_key
                add_next_to_value = False
            elif current_key:
                if add_next_to_value:
                    additional_values.append(line)
                else:
                    if additional_values:
                        current_key.add_to_last("\n".join(additional_values))
                        additional_values = []
                    current_key.parse(line)
                add_next_to_value = line.endswith("\\")
        if current_key and additional_values:
            current_key.add_to_last("\n".join(additional_values))

    @property
    def entries(self) -> List[RegistryEntry]:
        """Keys of the registry, in file order, with decoded values"""
        return [
            RegistryEntry(path=key.name, values={name: decode_value(value) for name, value in key.subkeys.items()})
            for key in self.keys.values()
        ]


class WineRegistryKey:
    def __init__(self, key_def):
        self.subkeys = OrderedDict()
        # Text after the closing bracket, usually a timestamp, is ignored
        raw_name = re.split(re.compile(r"(?<=[^\\]\]) "), key_def.strip(), maxsplit=1)[0]
        self.name = raw_name.replace("\\\\", "/").strip("[]")

    def parse(self, line):
        """Parse a registry line, populating subkeys"""
        if len(line) < 4:
            # Line is too short, nothing to parse
            return

        if line.startswith('"'):
            try:
                key, value = re.split(re.compile(r"(?<![^\\]\\\")="), line, maxsplit=1)
            except ValueError as ex:
                logger.error("Unable to parse line %s: %s", line, ex)
                return
            key = key[1:-1]
            self.subkeys[key] = value
        elif line.startswith("@"):
            _key, value = line.split("=", 1)
            self.subkeys["default"] = value

    def add_to_last(self, line):
        if not self.subkeys:
            return
        last_subkey = next(reversed(self.subkeys))
        self.subkeys[last_subkey] += "\n{}".format(line)


class WineRegistryParser:
    """Turns the content of a Wine registry file into a list of entries"""

    def parse(self, content: str) -> List[RegistryEntry]:
        registry = WineRegistry()
        registry.parse_lines(content.splitlines())
        return registry.entries
