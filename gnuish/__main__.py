r"""
gnuish descriptor generator.

    python -m gnuish generate tools.files:Files,tools.net:Server -o tools/commands.json

Describes the named handler classes and writes the descriptor document that
Registry/discover() read back at startup ('-o -' writes to stdout). Ship the file
as package data next to the handlers so discover("tools") picks it up.
"""
import sys

from .descriptors import dump
from .handlers import Option, command, describe
from .logs import get_logger
from .main import Cli
from .utils import resolve

logger = get_logger(__name__)


class References(tuple):
    """comma separated handler references ("module:QualName")."""

    @classmethod
    def valueof(cls, text):
        references = cls(part.strip() for part in text.split(",") if part.strip())
        if not references:
            raise ValueError("no handler reference given")
        return references


class Generator:
    output: str = Option("o", default="commands.json", descr="file the descriptors are written to ('-' for stdout)")

    @command
    def generate(self, handlers: References):
        """
        write the command descriptors of one or more handler classes.

        :param handlers: comma separated handler references, e.g. tools.files:Files
        """
        descriptors = []
        for reference in handlers:
            descriptors.extend(describe(resolve(reference)))
        if self.output == "-":
            dump(descriptors, sys.stdout)
        else:
            dump(descriptors, self.output)
        logger.info("wrote %d descriptors to %s", len(descriptors), self.output)


def main(args=None):
    """console script entry point."""
    Cli(Generator, prog="gnuish").run(sys.argv[1:] if args is None else args)


if __name__ == '__main__':
    main()
