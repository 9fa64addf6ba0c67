"""Prompt templates for the completion call."""

NO_INFORMATION_REPLY = (
    "Sorry, I could not find relevant information in the source you provided."
)

CONTEXT_PROMPT = """Based on the following information from the source:

{context}

Answer this question: {query}
If the information is not there, say "{no_information}\""""

PLAIN_PROMPT = """Answer this question: {query}
If you do not have relevant information, say "{no_information}\""""


def build_context_prompt(context: str, query: str) -> str:
    """Prompt grounding the answer in the retrieved chunk."""
    return CONTEXT_PROMPT.format(
        context=context, query=query, no_information=NO_INFORMATION_REPLY
    )


def build_plain_prompt(query: str) -> str:
    """Prompt used when no stored chunk is relevant enough."""
    return PLAIN_PROMPT.format(query=query, no_information=NO_INFORMATION_REPLY)
