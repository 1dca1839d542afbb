"""
Dice rolling under an alias, with help text.

    knit examples.dicebot
"""

import re

from knit import Alias, CommandListener, HelpResponder, RandomMessageResponder


def register(bot):
    bot.use(Alias(name="DiceBot", avatar="game_die"))

    bot.use(CommandListener(
        name="dice roller",
        trigger=re.compile(r"roll (a )?die", re.IGNORECASE),
        handler=RandomMessageResponder(
            alias="DiceBot",
            messages=["1", "2", "3", "4", "5", "6"],
        ),
        help_info={
            "emoji": "game_die",
            "description": "Roll a six-sided die",
            "examples": ["roll a die"],
        },
    ))

    bot.use(CommandListener(
        name="help",
        trigger="help",
        handler=HelpResponder(),
    ))
