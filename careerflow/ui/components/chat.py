"""
Career assistant chat tab.
"""

import streamlit as st

from careerflow.ai_processing import ERROR_REPLY, collect_reply, stream_chat_message
from careerflow.models import Message, new_record_id
from careerflow.ui.session import mutate, run_async

CLEARED_MESSAGE = "Chat history cleared. How can I help you today?"


class ChatTab:
    """Chat tab component."""

    def __init__(self):
        self.messages = st.session_state.collections.messages
        self.llm = st.session_state.llm_manager

    def render(self):
        st.markdown("### 💬 Career Assistant")

        if st.button("🧹 Clear chat"):
            mutate(self.messages, [Message(id=new_record_id(), role="model", content=CLEARED_MESSAGE)])
            st.rerun()

        for message in self.messages.data:
            with st.chat_message("assistant" if message.role == "model" else "user"):
                st.markdown(message.content)

        prompt = st.chat_input("Ask about interviews, negotiation, strategy...")
        if prompt:
            self._send(prompt)

    def _send(self, prompt: str):
        history = self.messages.data
        user_msg = Message(id=new_record_id(), role="user", content=prompt)
        mutate(self.messages, lambda prev: [*prev, user_msg])

        with st.chat_message("user"):
            st.markdown(prompt)

        with st.chat_message("assistant"):
            placeholder = st.empty()
            reply = run_async(collect_reply(
                stream_chat_message(history, prompt, llm=self.llm),
                on_chunk=placeholder.markdown,
            ))

        replies = []
        if reply.text:
            # Partial text stays visible even when the stream broke off
            replies.append(Message(id=new_record_id(1), role="model", content=reply.text))
        if not reply.ok:
            replies.append(Message(id=new_record_id(2), role="model", content=ERROR_REPLY))
        mutate(self.messages, lambda prev: [*prev, *replies])
        st.rerun()
