"""Emulator options from the command line and an ini file, and the device table."""

from __future__ import annotations

import argparse
import logging
import os
import re
import sys
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable, Iterator, Optional

log = logging.getLogger(__name__)

MAXDEV = 16
UNITS = 8

# Values of Device.where: how a unit's host directory or image is accessed.
WHERE_UNIX = 0
WHERE_QDOS_FS = 1
WHERE_QDOS_LIKE = 2

DEFAULT_CONFIG = "sqlux.ini"
DEFAULT_VERSION = "v0.0.0-unknown"

_HELP_HEAD = (
    "\n"
    "Usage: sqlux [OPTIONS] [args...]\n"
    "\n"
    "Positionals:\n"
    "  args                        Arguments passed to QDOS\n"
    "\n"
    "Options:\n"
    "  -h,--help                   Print this help message and exit\n"
    "  -f,--config [sqlux.ini]     Read an ini file\n"
)
_HELP_TAIL = "  --version                   version number\n"
_HELP_COLUMN = 30


class OptionType(Enum):
    """Kind of value an option holds."""

    INT = "int"
    CHAR = "char"
    DEV = "dev"


@dataclass
class Option:
    """One emulator option with its current value."""

    name: str
    alias: str
    help: str
    type: OptionType
    int_value: int = 0
    str_value: Optional[str] = None


_DEFAULT_OPTIONS = (
    Option("bdi1", "", "file exposed by the BDI interface", OptionType.CHAR),
    Option("boot_cmd", "b", "command to run on boot (executed in basic)", OptionType.CHAR),
    Option("boot_device", "d", "device to load BOOT file from", OptionType.CHAR, 0, "mdv1"),
    Option("cpu_hog", "", "1 = use all cpu, 0 = sleep when idle", OptionType.INT, 1),
    Option("device", "", "QDOS_name,path,flags (may be used multiple times", OptionType.DEV),
    Option("fast_startup", "", "1 = skip ram test (does not affect Minerva)", OptionType.INT),
    Option("filter", "", "enable bilinear filter when zooming", OptionType.INT),
    Option(
        "fixaspect",
        "",
        "0 = 1:1 pixel mapping, 1 = 2:3 non square pixels, 2 = BBQL aspect non square pixels",
        OptionType.INT,
    ),
    Option("iorom1", "", "rom in 1st IO area (Minerva only 0x10000 address)", OptionType.CHAR),
    Option("iorom2", "", "rom in 2nd IO area (Minerva only 0x14000 address)", OptionType.CHAR),
    Option("joy1", "", "1-8 SDL2 joystick index", OptionType.INT),
    Option("joy2", "", "1-8 SDL2 joystick index", OptionType.INT),
    Option("kbd", "", "keyboard language DE, GB, ES, IT, US", OptionType.CHAR, 0, "US"),
    Option("no_patch", "n", "disable patching the rom", OptionType.INT),
    Option(
        "palette",
        "",
        "0 = Full colour, 1 = Unsaturated colours (slightly more CRT like), "
        "2 =  Enable grayscale display",
        OptionType.INT,
    ),
    Option("print", "", "command to use for print jobs", OptionType.CHAR, 0, "lpr"),
    Option(
        "ramtop",
        "r",
        "The memory space top (128K + QL ram, not valid if ramsize set)",
        OptionType.INT,
        256,
    ),
    Option("ramsize", "", "The size of ram", OptionType.INT),
    Option("resolution", "g", "resolution of screen in mode 4", OptionType.CHAR, 0, "512x256"),
    Option("romdir", "", "path to the roms", OptionType.CHAR, 0, "roms"),
    Option("romport", "", "rom in QL rom port (0xC000 address)", OptionType.CHAR),
    Option(
        "romim",
        "",
        "rom in QL rom port (0xC000 address, legacy alias for romport)",
        OptionType.CHAR,
    ),
    Option("ser1", "", "device for ser1", OptionType.CHAR),
    Option("ser2", "", "device for ser2", OptionType.CHAR),
    Option("ser3", "", "device for ser3", OptionType.CHAR),
    Option("ser4", "", "device for ser4", OptionType.CHAR),
    Option(
        "shader",
        "",
        "0 = Disabled, 1 = Use flat shader, 2 = Use curved shader",
        OptionType.INT,
    ),
    Option(
        "shader_file",
        "",
        "Path to shader file to use if SHADER is 1 or 2",
        OptionType.CHAR,
        0,
        "shader.glsl",
    ),
    Option("skip_boot", "", "1 = skip f1/f2 screen, 0 = show f1/f2 screen", OptionType.INT, 1),
    Option("sound", "", "volume in range 1-8, 0 to disable", OptionType.INT),
    Option(
        "speed", "", "speed in factor of BBQL speed, 0.0 for full speed", OptionType.CHAR, 0, "0.0"
    ),
    Option("strict_lock", "", "enable strict file locking", OptionType.INT),
    Option("sysrom", "", "system rom", OptionType.CHAR, 0, "MIN198.rom"),
    Option("win_size", "w", "window size 1x, 2x, 3x, max, full", OptionType.CHAR, 0, "1x"),
    Option("verbose", "v", "verbosity level 0-3", OptionType.INT, 1),
)


def _atoi(text: str) -> int:
    match = re.match(r"\s*([+-]?\d+)", text)
    return int(match.group(1)) if match else 0


def _same(a: str, b: str) -> bool:
    return a.lower() == b.lower()


@dataclass
class Device:
    """A QDOS directory device with up to eight units."""

    name: str
    where: list[int] = field(default_factory=lambda: [WHERE_UNIX] * UNITS)
    present: list[bool] = field(default_factory=lambda: [False] * UNITS)
    mount_points: list[Optional[str]] = field(default_factory=lambda: [None] * UNITS)
    clean: list[bool] = field(default_factory=lambda: [False] * UNITS)


def _replace_pid(path: str) -> str:
    if "%x" not in path:
        return path
    pieces = path.split("%x")
    if len(pieces) > 2:
        log.warning("only one %%x allowed in %s", path)
    return f"{pieces[0]}{os.getpid():x}{pieces[1]}"


class DeviceTable:
    """Fixed-size table of directory devices."""

    def __init__(self) -> None:
        self.slots: list[Optional[Device]] = [None] * MAXDEV

    def __iter__(self) -> Iterator[Device]:
        return (device for device in self.slots if device is not None)

    def find(self, name: str) -> Optional[Device]:
        """Return the device with this name, ignoring case, or None."""
        return next((d for d in self if _same(d.name, name)), None)

    def install(self, parts: Iterable[str], home: str = "") -> Optional[Device]:
        """Install a device from ``NAMEn,path,flags...`` split at the commas.

        Unit 0 removes the device. Returns the device that was changed, or
        None when it was removed. Raises ValueError when the table is full.
        """
        parts = list(parts)
        if not parts or not parts[0]:
            raise ValueError("empty device definition")

        name = parts[0]
        if name[-1] in "0123456789":
            unit = int(name[-1])
            name = name[:-1]
        else:
            unit = -1

        found: Optional[int] = None
        free: Optional[int] = None
        for i, device in enumerate(self.slots):
            if device is not None and _same(device.name, name):
                found = i
                break
            if device is None and free is None:
                free = i

        if found is None and free is None:
            raise ValueError(
                "no more free entries in Directory Device Driver table"
            )

        if found is not None and unit == 0:
            self.slots[found] = None
            return None

        if free is not None:
            found = free
            self.slots[found] = Device(name.upper())
        device = self.slots[found]
        assert device is not None

        if 1 <= unit <= UNITS:
            index = unit - 1
            is_ram = _same(device.name, "ram")
            if len(parts) > 1:
                path = parts[1]
                if path.startswith("~"):
                    path = f"{home}/{path[1:]}"
                path = _replace_pid(path)

                if not is_ram and not os.path.exists(path):
                    log.warning(
                        "Mountpoint %s for device %s%d_ may not be accessible",
                        path, name, unit,
                    )
                if os.path.isdir(path) and not path.endswith("/"):
                    path += "/"
                if is_ram and not path.endswith("/"):
                    path += "/"

                device.mount_points[index] = path
                device.present[index] = True
            else:
                device.present[index] = False

            if len(parts) > 2:
                flag_set = False
                for flag in parts[2:]:
                    if "native" in flag or "qdos-fs" in flag:
                        device.where[index] = WHERE_QDOS_FS
                        flag_set = True
                    elif "qdos-like" in flag:
                        device.where[index] = WHERE_QDOS_LIKE
                        flag_set = True
                    if "clean" in flag:
                        device.clean[index] = True
                        flag_set = True
                if not flag_set:
                    log.warning(
                        "flags %s in definition of %s%d_ not recognised",
                        ",".join(parts[2:]), name, unit,
                    )
        return device


def _ini_entries(text: str) -> Iterator[tuple[str, str, str]]:
    section = ""
    for raw in text.lstrip("\ufeff").splitlines():
        line = raw.strip()
        if not line or line[0] in ";#":
            continue
        if line.startswith("["):
            end = line.find("]")
            if end > 0:
                section = line[1:end].strip()
            continue
        seps = [pos for pos in (line.find("="), line.find(":")) if pos >= 0]
        if not seps:
            continue
        split = min(seps)
        name = line[:split].rstrip()
        value = line[split + 1:]
        comment = re.search(r"\s;", value)
        if comment:
            value = value[:comment.start()]
        yield section, name, value.strip()


class _ArgParser(argparse.ArgumentParser):
    def error(self, message: str):  # type: ignore[override]
        raise ValueError(message)


class EmulatorOptions:
    """Option table, with values from defaults, the ini file and the command line."""

    def __init__(self, home: Optional[str] = None, version: str = DEFAULT_VERSION) -> None:
        self.home = os.environ.get("HOME", "") if home is None else home
        self.version = version
        self.options: dict[str, Option] = {o.name: replace(o) for o in _DEFAULT_OPTIONS}
        self.devices = DeviceTable()
        self.args: list[str] = []
        self.config = DEFAULT_CONFIG
        self._cli: dict[str, list] = {}

    def help_text(self) -> str:
        """Return the usage text listing every option and its current default."""
        items = []
        for option in self.options.values():
            item = f"  -{option.alias}," if option.alias else "  "
            item += f"--{option.name}"
            if option.type is OptionType.INT:
                item += f" [{option.int_value}]"
            elif option.type is OptionType.CHAR and option.str_value is not None:
                item += f" [{option.str_value}]"
            items.append(item.ljust(_HELP_COLUMN) + option.help + "\n")
        return _HELP_HEAD + "".join(items) + _HELP_TAIL

    def _parser(self) -> argparse.ArgumentParser:
        parser = _ArgParser(prog="sqlux", add_help=False, allow_abbrev=False)
        parser.add_argument("-h", "--help", action="store_true")
        parser.add_argument("--version", action="store_true")
        parser.add_argument(
            "-f", "--config", action="append", dest="config", default=argparse.SUPPRESS
        )
        for option in self.options.values():
            flags = [f"--{option.name}"]
            if option.alias:
                flags.append(f"-{option.alias}")
            parser.add_argument(
                *flags,
                action="append",
                dest=option.name,
                type=int if option.type is OptionType.INT else str,
                default=argparse.SUPPRESS,
            )
        parser.add_argument("args", nargs="*")
        return parser

    def _install_device(self, value: str) -> None:
        try:
            self.devices.install(value.split(","), self.home)
        except ValueError as exc:
            log.error("%s; check whether all these devices are needed", exc)

    def parse(self, argv: Optional[list[str]] = None) -> "EmulatorOptions":
        """Parse command-line arguments, then load the ini file they name.

        Raises ValueError for malformed arguments; --help and --version
        print and raise SystemExit(0).
        """
        if argv is None:
            argv = sys.argv[1:]
        namespace = vars(self._parser().parse_args(argv))

        if namespace.pop("help"):
            print(self.help_text(), end="")
            raise SystemExit(0)
        if namespace.pop("version"):
            print(self.version)
            raise SystemExit(0)

        self.args = list(namespace.pop("args"))
        config = namespace.pop("config", None)
        self._cli = namespace

        for device in self._cli.get("device", []):
            self._install_device(device)

        self.config = config[-1] if config else DEFAULT_CONFIG
        try:
            self.load_ini(self.config)
        except OSError:
            log.warning("Can't load '%s'", self.config)
        return self

    def load_ini(self, path: str) -> None:
        """Apply the settings of an ini file; raises OSError if it cannot be read."""
        with open(path, encoding="utf-8", errors="replace") as handle:
            text = handle.read()
        for _section, name, value in _ini_entries(text):
            self._apply(name, value)

    def _apply(self, name: str, value: str) -> bool:
        if _same(name, "device"):
            self._install_device(value)
            return True
        for option in self.options.values():
            if _same(name, option.name):
                if option.type is OptionType.CHAR:
                    option.str_value = value
                    return True
                if option.type is OptionType.INT:
                    option.int_value = _atoi(value)
                    return True
                return False
        return False

    def get_string(self, name: str) -> str:
        """Return a string option, the command line taking precedence; "" if unset."""
        given = self._cli.get(name)
        if given:
            return str(given[-1])
        option = self.options.get(name)
        if option is not None and option.type is OptionType.CHAR and option.str_value is not None:
            return option.str_value
        return ""

    def get_int(self, name: str) -> int:
        """Return an integer option, the command line taking precedence; 0 if unknown."""
        given = self._cli.get(name)
        if given:
            value = given[-1]
            return value if isinstance(value, int) else _atoi(value)
        option = self.options.get(name)
        return option.int_value if option is not None else 0


def parse_options(argv: Optional[list[str]] = None) -> EmulatorOptions:
    """Create an option set and parse the given or current command line."""
    return EmulatorOptions().parse(argv)