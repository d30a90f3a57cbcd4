"""Handles interactive/command-line mode for the wwulang compiler. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """wwulang compiler shell. A blank line, or a line starting with 'q' or 'Q', ends the session."""
    intro = "WwuLang Compiler :: LLVM backend\nType an expression, '?' for help, or 'q' to quit."
    prompt = "> "
    QUIT = ("q", "Q")

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.line_num = 0

    def onecmd(self, line):
        """Only blank lines, help and end of input are shell commands. Everything else is compiled, even when its first
        word happens to name a command ('EOF = 2; EOF * 3').
        """
        command = line.strip()
        if not command:
            return self.emptyline()
        if command in ("?", "help"):
            return self.do_help("")
        if command == "EOF":
            return self.do_EOF("")

        self.lastcmd = line
        return self.default(command)

    def default(self, line):
        """Compiles arbitrary wwulang line as its own compilation unit."""
        if line.startswith(Shell.QUIT):
            return True

        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            self.sess.run(line, self.line_num)
        return False

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the wwulang compiler!\n\n"
              "Every line you type is compiled on its own: variables assigned on a line are visible \n"
              "to later statements on that same line only. Statements are separated by ';'.\n\n"
              "Try it out by typing 'x = 5; y = x + 2; y * 3'. The shell will show the parsed tree \n"
              "in postfix form and the value of the last statement, 21.")

    def emptyline(self):
        """A blank line ends the session."""
        return True

    def do_EOF(self, arg):
        """Exits compiler."""
        print()
        return True
