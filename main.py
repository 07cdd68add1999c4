from rich.console import Console
from rich.pretty import pprint

from textcmd import *

__prog__ = "demo"


@command("greet", aliases=("hi",))
def greet(call, parsed):
    """Say hello to someone."""
    for _ in range(parsed.get_optional("times", "integer")):
        call.success("hello %s" % parsed.get_optional("name", "string"))


greet.string("name", False, "who to greet", "n", "world")
greet.integer("times", False, "how many greetings", "t", 1)


if __name__ == '__main__':
    console = Console()
    manager = CommandManager("!", strict=True)
    manager.add(greet)
    pprint(greet)
    console.print(greet)
    while (line := console.input("> ")) not in ("exit", "quit"):
        invoke(manager, ConsoleCall(line, console))
