from chatcmd.commands import Command


class NoMain(Command):
    overview = "Has no handler."


COMMANDS = NoMain
