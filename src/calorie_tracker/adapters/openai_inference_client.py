"""OpenAI Chat Completions client for meal photo inference."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from calorie_tracker.domain.errors import InferenceUnavailable
from calorie_tracker.services.analysis import InferenceClient


@dataclass
class OpenAIInferenceClient(InferenceClient):
    """Inference client backed by the OpenAI Chat Completions API."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIInferenceClient":
        """Create an OpenAI inference client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        image_url: str,
    ) -> str:
        """Send the photo with the instructions and return the answer text."""
        try:
            response = await self.client.chat.completions.create(
                model=model,
                temperature=temperature,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": user_prompt},
                            {"type": "image_url", "image_url": {"url": image_url}},
                        ],
                    },
                ],
            )
        except OpenAIError as exc:
            raise InferenceUnavailable(f"OpenAI request failed: {exc}") from exc

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            raise InferenceUnavailable("OpenAI returned a malformed response") from exc
        text = _content_text(content)
        if not text:
            raise InferenceUnavailable("OpenAI returned an empty response")
        return text


def _content_text(content: object) -> str:
    """Flatten message content that may arrive as a string or a list of parts."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, dict):
                text = part.get("text")
            else:
                text = getattr(part, "text", None)
            if isinstance(text, str):
                parts.append(text)
        return "\n".join(parts)
    return ""
