"""Interactive prompts."""

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

import click

from navgen.errors import PromptCancelled

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Choice(Generic[T]):
    """Selectable entry shown by its title."""

    title: str
    value: T


def parse_selection(answer: str, count: int) -> list[int]:
    """Parse a multi-select answer into zero-based indexes.

    Accepts ``a`` (all), ``n`` or an empty answer (none), and comma or
    space separated one-based numbers and ``start-end`` ranges.

    Raises:
        click.BadParameter: If the answer cannot be parsed
    """
    answer = answer.strip().lower()
    if answer in ("", "n", "none"):
        return []
    if answer in ("a", "all"):
        return list(range(count))

    selected: list[int] = []
    for token in answer.replace(",", " ").split():
        start_text, sep, end_text = token.partition("-")
        try:
            start = int(start_text)
            end = int(end_text) if sep else start
        except ValueError:
            raise click.BadParameter(f"not a number or range: {token}") from None
        if start < 1 or end > count or start > end:
            raise click.BadParameter(f"out of range 1-{count}: {token}")
        for index in range(start - 1, end):
            if index not in selected:
                selected.append(index)
    return selected


class Prompt:
    """Terminal prompts run off the event loop.

    Prompts from concurrent tasks are serialized so their output never
    interleaves.
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    async def multi_select(self, message: str, choices: Sequence[Choice[T]]) -> list[T]:
        """Ask the user to pick any number of choices.

        Args:
            message: Question shown above the list
            choices: Entries to pick from

        Returns:
            Values of the selected choices, in list order

        Raises:
            PromptCancelled: If the user aborts the prompt
        """
        if not choices:
            return []
        async with self._lock:
            indexes = await asyncio.to_thread(self._ask, message, choices)
        return [choices[index].value for index in indexes]

    def _ask(self, message: str, choices: Sequence[Choice[T]]) -> list[int]:
        click.echo(click.style(f"[?] {message}", fg="cyan"))
        for number, choice in enumerate(choices, start=1):
            click.echo(f"  {number:>3}) {choice.title}")

        try:
            answer = click.prompt(
                "Numbers or ranges, a = all, n = none",
                default="n",
                show_default=False,
                value_proc=lambda value: parse_selection(value, len(choices)),
            )
        except (click.Abort, EOFError) as e:
            raise PromptCancelled("Prompt cancelled") from e
        return answer
