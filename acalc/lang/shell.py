"""Handles interactive/command-line mode for acalc. Uses cmd as backend."""

import cmd

from acalc.lang.session import Session


class Shell(cmd.Cmd):
    """Calculator shell. Every line is evaluated on its own."""
    intro = "acalc :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "

    def __init__(self, error_handler, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.error_handler = error_handler
        self.error_handler.fatal = False  # a bad line should not end the shell

    def default(self, line):
        """Evaluates line and prints its values."""
        with self.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            Session(self.error_handler, Session.SH_FILE, line).run(echo=True, render=str)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to acalc!\n\n"
              "acalc evaluates non-negative integers and sums of two of them, such as '81 + 2'.\n"
              "Sums are checked: a result that does not fit in a 32-bit integer is an error.\n\n"
              "Type 'exit' or press Ctrl-D to leave.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
