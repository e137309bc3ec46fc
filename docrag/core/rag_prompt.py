"""
RAG answer prompt.

Defines the chat prompt used to answer questions from assembled context.
The system message comes from the personality provider at call time.

Dependencies: langchain_core.prompts
System role: Prompt template for grounded answers
"""

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate

RAG_ANSWER_PROMPT = ChatPromptTemplate.from_messages([
    ("system", "{system_prompt}"),
    ("human", """Context from documents:
{context}

Question: {question}

Answer the question using only the information from the context above."""),
])


def build_messages(system_prompt: str, context: str, question: str) -> list[BaseMessage]:
    """
    Render the prompt into chat messages.

    Args:
        system_prompt: Personality instruction
        context: Assembled source context
        question: User's question

    Returns:
        list[BaseMessage]: System and human messages
    """
    return RAG_ANSWER_PROMPT.invoke({
        "system_prompt": system_prompt,
        "context": context,
        "question": question,
    }).to_messages()
