"""
Career counselor chat.

``stream_chat_message`` yields the reply as it arrives. The running text is
the consumer's business; ``collect_reply`` is the standard consumer and keeps
whatever arrived before a mid-stream failure.
"""

from dataclasses import dataclass
from typing import AsyncIterator, Callable, List, Optional, Sequence, Union

from ..models import Message
from ..utils import get_logger
from .llm_manager import LLMManager, get_llm_manager
from .style import BANNED_WORDS_INSTRUCTION

logger = get_logger(__name__)

CHAT_SYSTEM_PROMPT = f"""You are a helpful AI career counselor. Help the user with job search advice, interview prep, and career planning.
{BANNED_WORDS_INSTRUCTION}"""

ERROR_REPLY = "I'm sorry, I encountered an error. Please try again."


@dataclass
class ChatReply:
    text: str
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _to_turn(entry: Union[Message, dict]) -> dict:
    if isinstance(entry, Message):
        return {"role": entry.role, "content": entry.content}
    return {"role": entry["role"], "content": entry["content"]}


async def stream_chat_message(history: Sequence[Union[Message, dict]], new_message: str,
                              llm: Optional[LLMManager] = None) -> AsyncIterator[str]:
    """
    Stream the model's reply to ``new_message``.

    The returned iterator is finite and can be consumed once. Failures are
    raised from the iterator to the consumer.
    """
    llm = llm or get_llm_manager()
    turns: List[dict] = [_to_turn(entry) for entry in history]
    async for chunk in llm.stream_chat(turns, new_message, system_prompt=CHAT_SYSTEM_PROMPT):
        yield chunk


async def collect_reply(chunks: AsyncIterator[str],
                        on_chunk: Optional[Callable[[str], None]] = None) -> ChatReply:
    """
    Concatenate streamed chunks.

    Args:
        chunks: Reply stream from :func:`stream_chat_message`
        on_chunk: Called with the text so far after every chunk

    Returns:
        The full reply, or the partial reply with the error that interrupted it
    """
    text = ""
    try:
        async for chunk in chunks:
            if not chunk:
                continue
            text += chunk
            if on_chunk:
                on_chunk(text)
    except Exception as e:
        logger.error(f"Chat stream failed after {len(text)} characters: {e}")
        return ChatReply(text=text, error=e)
    return ChatReply(text=text)
