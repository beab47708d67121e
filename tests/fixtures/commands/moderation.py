from chatcmd.commands import Command, SubCommand


class Kick(Command):
    overview = "Kick a member."
    category = "Moderation"
    guild_only = True
    permissions = {"both": "kick_members"}

    async def main(self, ctx):
        await ctx.send(f"kicked {ctx.args[0] if ctx.args else 'nobody'}")


class Purge(Command):
    overview = "Delete recent messages."
    category = "Moderation"
    permissions = {"author": ["manage_messages", "read_message_history"], "self": "manage_messages"}
    opts = {"boolean": ["silent"], "string": ["reason"], "defaults": {"limit": 10}}

    async def main(self, ctx):
        await ctx.send(f"purged {ctx.opts['limit']}")


class Role(Command):
    overview = "Manage roles."
    category = "Moderation"

    def __init__(self, client=None):
        super().__init__(client)
        self.add_subcommand(SubCommand("add", "Give a role.", self.add_role, usage="<member> <role>"))

        @self.subcommand("remove", "Take a role away.")
        async def remove_role(ctx):
            await ctx.send("role removed")

    async def main(self, ctx):
        await ctx.send("role overview")

    async def add_role(self, ctx):
        await ctx.send("role added")


COMMANDS = [Kick, Purge, Role]
