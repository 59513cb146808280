from typing import Protocol

from langchain_core.messages import HumanMessage  # type: ignore
from langchain_groq import ChatGroq  # type: ignore

from app.config import Settings


class TextGenerator(Protocol):
    def generate(self, prompt: str) -> str:
        ...


class GroqTextGenerator:
    """
    One prompt in, full completion text out. No streaming, no retries.
    """

    def __init__(self, settings: Settings):
        self.llm = ChatGroq(
            api_key=settings.groq_api_key,
            model=settings.groq_model,
            temperature=settings.temperature,
        )

    def generate(self, prompt: str) -> str:
        response = self.llm.invoke([HumanMessage(content=prompt)])
        content = response.content
        return content if isinstance(content, str) else str(content)
