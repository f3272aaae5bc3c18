"""
gnuish help rendering: pure formatting of descriptors with Rich.

- summary(descriptors): the “available commands” screen shown when no command is given.
- usage(descriptor): the single-command screen shown for '<command> --help'.

Palette keys (override any of them with a __styles__ mapping in __main__)
- usage-label, program-name, metavar, description-section
- group-label, option-name, argument-name, argument-description
- commands-title, command-name, command-description, hint

When colorful is False every style is dropped. When fancy is True the screen is wrapped
in a rounded panel.
"""
import re
from collections import defaultdict

from rich.box import ROUNDED
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

TITLE = "available commands are:"


def _palette(colorful):
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",  # cyan headline
        "program-name": "bold #FF4D94",  # magenta-pink command name
        "metavar": "bold #FFD600",  # amber placeholders
        "description-section": "italic #A3A3A3",

        "group-label": "bold #FFFFFF",
        "option-name": "bold #00E6FF",
        "argument-name": "bold #FFD600",
        "argument-description": "#9CA3AF",

        "commands-title": "bold #FFFFFF",
        "command-name": "bold #36C5F0",
        "command-description": "#9CA3AF",
        "hint": "italic #9CE19C",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    return styler


def _sentence(text):
    """first sentence of a summary (up to and including the first period)."""
    text = " ".join(text.split())
    match = re.match(r"[^.]*\.?", text)
    return match[0] if match else text


def summary(descriptors, /, *, prog="", colorful=True, fancy=False):
    """
    render the list of available commands with the first sentence of each summary.
    """
    styler = _palette(colorful)
    descriptors = sorted(descriptors, key=lambda descriptor: descriptor.command)

    table = Table.grid(padding=(0, 2))
    table.add_column(no_wrap=True)
    table.add_column()
    for descriptor in descriptors:
        table.add_row(
            Text(" " + descriptor.command, styler("command-name")),
            Text(_sentence(descriptor.summary), styler("command-description")),
        )

    route = " ".join(part for part in (prog, "[command]") if part)
    renders = [
        Text(TITLE, styler("commands-title")),
        Text(""),
        table,
        Text(""),
        Text(" try `%s --help' for more information." % route, styler("hint")),
    ]
    if fancy:
        return Panel(Group(*renders[2:]), title=Text(TITLE, styler("commands-title")), title_align="left", box=ROUNDED)
    return Group(*renders)


def usage(descriptor, /, *, colorful=True, fancy=False):
    """
    render the usage screen of one command: synopsis, summary, options and arguments.
    """
    styler = _palette(colorful)

    synopsis = Text()
    synopsis.append("usage", styler("usage-label")).append(": ")
    synopsis.append(descriptor.command, styler("program-name"))
    if descriptor.options:
        synopsis.append(" [OPTION]...")
    for argument in descriptor.arguments:
        synopsis.append(" ")
        name = argument.name if argument.default is None else "[%s]" % argument.name
        synopsis.append(name, styler("metavar"))

    renders = [synopsis]
    if descriptor.summary:
        renders.extend([Text(""), Text(" " + descriptor.summary, styler("description-section"))])

    if descriptor.options:
        table = Table.grid(padding=(0, 2))
        table.add_column(no_wrap=True)
        table.add_column()
        for option in descriptor.options:
            names = ", ".join(
                name for name in (
                    "-%s" % option.short if option.short else None,
                    "--%s" % option.long,
                ) if name
            )
            table.add_row(Text(" " + names, styler("option-name")), Text(option.summary, styler("argument-description")))
        renders.extend([Text(""), Text("options:", styler("group-label")), table])

    if descriptor.arguments:
        table = Table.grid(padding=(0, 2))
        table.add_column(no_wrap=True)
        table.add_column()
        for argument in descriptor.arguments:
            description = argument.summary
            if argument.default is not None:
                description = ("%s (default: %s)" % (description, argument.default)).strip()
            table.add_row(Text(" " + argument.name, styler("argument-name")), Text(description, styler("argument-description")))
        renders.extend([Text(""), Text("arguments:", styler("group-label")), table])

    if fancy:
        return Panel(Group(*renders), title=Text(descriptor.command.upper() + " HELP", styler("program-name")),
                     title_align="left", box=ROUNDED)
    return Group(*renders)


__all__ = (
    "TITLE",
    "summary",
    "usage",
)
