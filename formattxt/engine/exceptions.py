"""Errors raised by the formatting engine."""


class FormatTxtError(Exception):
    """Base formatting error."""


class InvalidAttribute(FormatTxtError, ValueError):
    """An anchor attribute value mixes single and double quotes."""

    def __init__(self, name: str, value: str):
        super().__init__(
            f"The value for {name} contains both single and double quotes (' and \")."
        )
        self.name = name
        self.value = value
