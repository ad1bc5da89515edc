"""
Defines the ordered argument builder used for every FFmpeg invocation.

FFmpeg arguments are positional: a flag is immediately followed by its value,
input options precede the `-i` they apply to, and the output path comes last.
`FFmpegCommand` enforces those rules so the command builders cannot produce a
dangling flag or reference an input index that was never added.
"""

from typing import List, Union

Token = Union[str, int, float]


class FFmpegCommand:
    """
    Ordered builder for an FFmpeg argument list (the binary itself is not included).

    Usage:
        cmd = FFmpegCommand()                  # starts with "-y"
        index = cmd.add_input("in.mp4", "-ss", "00:00:02")
        cmd.append("-vframes", 1)
        args = cmd.output("out.jpg")
    """

    def __init__(self, overwrite: bool = True):
        self._args: List[str] = []
        self._input_count = 0
        self._finalized = False
        if overwrite:
            self.flag("-y")

    @property
    def input_count(self) -> int:
        """Number of inputs added so far; the next input gets this index."""
        return self._input_count

    @property
    def args(self) -> List[str]:
        return list(self._args)

    def flag(self, flag: str) -> "FFmpegCommand":
        """Appends a flag that takes no value (e.g. "-y", "-re")."""
        self._check_flag(flag)
        self._args.append(flag)
        return self

    def append(self, flag: str, *values: Token) -> "FFmpegCommand":
        """
        Appends a flag immediately followed by its value(s).

        Raises:
            ValueError: If no value is given, or a value is None or empty.
        """
        self._check_flag(flag)
        if not values:
            raise ValueError(f"Flag {flag} requires a value.")
        tokens = []
        for value in values:
            if value is None or str(value) == "":
                raise ValueError(f"Flag {flag} received an empty value.")
            tokens.append(str(value))
        self._args.append(flag)
        self._args.extend(tokens)
        return self

    def append_if(self, condition, flag: str, *values: Token) -> "FFmpegCommand":
        """Appends `flag` with `values` only when `condition` is truthy."""
        if condition:
            self.append(flag, *values)
        return self

    def add_input(self, path, *options: Token) -> int:
        """
        Adds an input, preceded by its input options, and returns its index.

        `options` is a flat flag/value sequence placed before `-i`, such as
        ("-ss", "2") or ("-f", "lavfi", "-t", "0.1").
        """
        self._check_open()
        self._append_options(options)
        self.append("-i", str(path))
        index = self._input_count
        self._input_count += 1
        return index

    def output(self, path) -> List[str]:
        """Appends the output path and returns the finished argument list."""
        self._check_open()
        if path is None or str(path) == "":
            raise ValueError("Output path must not be empty.")
        self._args.append(str(path))
        self._finalized = True
        return self.args

    def _append_options(self, options) -> None:
        i = 0
        options = [str(o) for o in options]
        while i < len(options):
            flag = options[i]
            values = []
            i += 1
            while i < len(options) and not _is_flag(options[i]):
                values.append(options[i])
                i += 1
            if values:
                self.append(flag, *values)
            else:
                self.flag(flag)

    def _check_flag(self, flag: str) -> None:
        self._check_open()
        if not _is_flag(flag):
            raise ValueError(f"Expected a flag starting with '-', got {flag!r}.")

    def _check_open(self) -> None:
        if self._finalized:
            raise ValueError("Command already has an output path; no more arguments can be added.")

    def __repr__(self) -> str:
        return f"FFmpegCommand({self._args!r})"


def _is_flag(token: str) -> bool:
    # Negative numbers ("-1") are values, not flags.
    return token.startswith("-") and len(token) > 1 and not token[1].isdigit()
