"""Console I/O used by the evaluator.

`DISPLAY` writes lines through `Console.write` and `SCAN` blocks on
`Console.read_line`, passing the prompt to show first. `StdConsole` talks to the terminal; `BufferedConsole`
feeds scripted input and records output, which is what the tests use.
`read_line` raises `EOFError` when no more input is available.
"""

from __future__ import annotations
import sys
from typing import Iterable, List, Optional, Protocol, TextIO


class Console(Protocol):
    def write(self, line: str) -> None: ...

    def read_line(self, prompt: str = "") -> str: ...


class StdConsole:
    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout

    def write(self, line: str) -> None:
        self.stdout.write(line + "\n")
        self.stdout.flush()

    def read_line(self, prompt: str = "") -> str:
        if prompt:
            self.stdout.write(prompt)
            self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EOFError("end of input")
        return line.rstrip("\r\n")


class BufferedConsole:
    def __init__(self, inputs: Iterable[str] = ()):
        self.inputs: List[str] = list(inputs)
        self.lines: List[str] = []
        self.prompts: List[str] = []

    def write(self, line: str) -> None:
        self.lines.append(line)

    def read_line(self, prompt: str = "") -> str:
        self.prompts.append(prompt)
        if not self.inputs:
            raise EOFError("end of input")
        return self.inputs.pop(0)

    @property
    def output(self) -> str:
        """Everything written so far, one line per write."""
        return "\n".join(self.lines)
