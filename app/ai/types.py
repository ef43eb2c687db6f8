from typing import Protocol


class AIClient(Protocol):
    async def generate(self, prompt: str, *, model: str | None = None) -> str: ...
