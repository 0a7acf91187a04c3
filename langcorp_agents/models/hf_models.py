from typing import Optional

from langchain_huggingface import HuggingFaceEndpoint, ChatHuggingFace

from langcorp_agents.config import settings


# Initialize the HuggingFace model endpoint
def get_hf_model(model_name: Optional[str] = None, timeout: Optional[int] = None, **kwargs) -> ChatHuggingFace:
    """A wrapper around the HuggingFace LLM endpoint for consistent usage across agents."""

    llm = ChatHuggingFace(
        llm=HuggingFaceEndpoint(
            model=model_name if model_name is not None else settings.support_model_name,
            timeout=timeout if timeout is not None else settings.request_timeout,
            huggingfacehub_api_token=settings.huggingface_api_key,
        ),
        **kwargs
    )
    return llm
