import asyncio
import io
import logging
import os
import shutil
import sys
import typing

import discord
import discord.ext.commands as commands
import yaml

import dndbot.plot as plot
import dndbot.roll_parser as roll_parser
from dndbot.roll import DiceRollError

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = os.path.join(os.path.dirname(__file__), "settings.default.yaml")

settings: typing.Dict[str, typing.Any] = {}

intents = discord.Intents.default()
intents.message_content = True

client = commands.Bot(
    command_prefix=lambda bot, message: settings.get("prefix", "!"),
    intents=intents,
    activity=discord.Game(name="!help"),
    status=discord.Status.idle,
)


@client.event
async def on_ready():
    logger.info("We have logged in as %s", client.user)


async def _run_with_timeout(ctx: commands.Context, impl: typing.Callable[[], typing.Awaitable[None]]):
    try:
        await asyncio.wait_for(impl(), timeout=settings["timeout"])
    except asyncio.TimeoutError:
        await ctx.send("Your roll took too long to evaluate. Sorry!")
    except DiceRollError as e:
        await ctx.send("Error in input: %s" % e.args[0])
    except BaseException as e:
        logger.exception("internal error while handling %r", ctx.message.content)
        try:
            await ctx.send("An internal error occured. Sorry!")
        except BaseException:
            pass
        raise e


@client.command(
    name="roll",
    brief="roll dice",
    description="""!roll <expr>

Parameters:
    expr - The expression to evaluate.

Result:
    Rolls a dice expression once. You can use XdY notation, the operators
    +, - and *, and brackets. Some examples:
        2d6+3       - roll two six-sided dice and add 3.
        d20 - 1     - roll a twenty-sided die and subtract 1.
        (d4)d6      - roll a d4, then roll that many d6.
        2(d8 + 1)   - roll a d8, add 1, and double it.
        -d6         - the same as 0 - d6.

    Use !analyze to see the odds of every outcome instead.
""",
)
async def roll_(ctx: commands.Context, *args: str):
    async def roll_impl():
        expr = roll_parser.parse(" ".join(args))
        result = await asyncio.to_thread(expr.roll)
        await ctx.send("**Input:** %s\n**Result:** %s" % (expr, result))

    await _run_with_timeout(ctx, roll_impl)


@client.command(
    brief="probability of every outcome",
    description="""!analyze <expr>

Parameters:
    expr - The expression to analyze. See !help roll for the syntax.

Result:
    Computes the exact chance of every possible result of the expression,
    without rolling, and attaches a graph of the distribution.
""",
)
async def analyze(ctx: commands.Context, *args: str):
    async def analyze_impl():
        expr = roll_parser.parse(" ".join(args))
        graph = await asyncio.to_thread(expr.freq_graph)
        image = await asyncio.to_thread(plot.plot, repr(expr), graph)
        await ctx.send(
            plot.summary(repr(expr), graph),
            file=discord.File(io.BytesIO(image), filename="image.png"),
        )

    await _run_with_timeout(ctx, analyze_impl)


def load_settings(path: str = "settings.yaml") -> typing.Optional[typing.Dict[str, typing.Any]]:
    if not os.path.exists(path):
        shutil.copy(DEFAULT_SETTINGS, path)
        return None
    with open(path) as f:
        result = yaml.safe_load(f) or {}
    with open(DEFAULT_SETTINGS) as f:
        defaults = yaml.safe_load(f)
    return {**defaults, **result}


def main(argv: typing.List[str] = sys.argv) -> int:
    loaded = load_settings()
    if loaded is None:
        print(
            "settings.yaml not detected!"
            " A default one has been provided."
            " Please edit that file and re-run this program."
        )
        return 1

    settings.update(loaded)
    logging.basicConfig(
        level=settings["log_level"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    client.run(settings["token"], log_handler=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
