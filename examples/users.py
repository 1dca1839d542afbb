"""
List workspace users on request, using a plain function handler.

    knit examples.users
"""

import re

from knit import CommandListener


def register(bot):

    def list_users(message):
        users = bot.data.get_users()
        user_list = "\n".join(user["name"] for user in users)
        bot.reply_to(message).with_({
            "text": f"*Users:*\n{user_list}",
            "mrkdwn": True,
        })

    bot.use(CommandListener(
        name="list users",
        trigger=re.compile(r"list users", re.IGNORECASE),
        handler=list_users,
    ))
