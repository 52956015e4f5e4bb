import logging

from rich.logging import RichHandler
from rich.pretty import pprint

from armature import *

# Host configuration hooks picked up by fault rendering.
__prog__ = "kick"

logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[RichHandler(show_path=False)])

kick = parameters(
    [ParameterDescription("user", "user", "the user to remove")],
    KeywordParser(
        KeywordsDescription(
            KeywordParameterDescription("dry-run", flag=True, descr="run without removing anyone"),
            KeywordParameterDescription("glob", flag=True, descr="allow globs in the user"),
            KeywordParameterDescription("room", "room", descr="only kick from this room"),
        ),
        ParameterDescription("reason", "string"),
    ),
)


if __name__ == '__main__':
    pprint(kick.usage())
    pprint(kick.parse([
        Reference("@", "spam:example.org"),
        Keyword("dry-run"),
        Keyword("room"),
        Reference("#", "lobby:example.org"),
        "flooding",
        "links",
    ]))
    if (outcome := kick.parse([Reference("@", "spam:example.org"), Keyword("room")])).is_err():
        report(outcome.err, fancy=True)
