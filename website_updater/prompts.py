"""
Yes/no, choice and free-text prompts used by the batch processor.
"""
import asyncio
from typing import Protocol, Sequence

YES_ANSWERS = {"y", "yes"}


class Prompter(Protocol):
    async def ask(self, question: str) -> str: ...

    async def confirm(self, question: str) -> bool: ...

    async def choose(self, question: str, choices: Sequence[str]) -> str: ...


class ConsolePrompter:
    """Prompts on the terminal. input() runs in a worker thread so the event loop stays free."""

    async def ask(self, question: str) -> str:
        answer = await asyncio.to_thread(input, question)
        return answer.strip()

    async def confirm(self, question: str) -> bool:
        answer = await self.ask(f"{question} (y/n): ")
        return answer.lower() in YES_ANSWERS

    async def choose(self, question: str, choices: Sequence[str]) -> str:
        """Ask until the answer is one of `choices` (case-insensitive). Blank picks the last one."""
        options = "/".join(choices)
        while True:
            answer = (await self.ask(f"{question} [{options}]: ")).lower()
            if not answer:
                return choices[-1]
            if answer in choices:
                return answer
