"""
LLM Providers
=============
Builds the LangChain chat model shared by the support workflow and the
SQL assistant.

Provider auto-detection priority: Groq → Azure OpenAI → OpenAI
Override with LLM_PROVIDER=groq|azure|openai to force a specific provider.

Groq needs the "groq" extra (langchain-groq); Azure and OpenAI use
langchain-openai.
"""
import logging
import os

logger = logging.getLogger(__name__)

PROVIDERS = ("groq", "azure", "openai")

DEFAULT_MODELS = {
    "groq":   "llama-3.3-70b-versatile",
    "azure":  "gpt-4o",
    "openai": "gpt-4o-mini",
}

_MODEL_ENV = {
    "groq":   "GROQ_MODEL",
    "azure":  "AZURE_OPENAI_DEPLOYMENT",
    "openai": "OPENAI_MODEL",
}


def detect_provider() -> str:
    """
    Return which LLM provider to use.

    LLM_PROVIDER wins when it names a known provider; otherwise the first
    provider whose API key is present, defaulting to OpenAI.
    """
    forced = os.getenv("LLM_PROVIDER", "").lower()
    if forced in PROVIDERS:
        return forced
    if os.getenv("GROQ_API_KEY"):
        return "groq"
    if os.getenv("AZURE_OPENAI_API_KEY"):
        return "azure"
    return "openai"


def model_name(provider: str) -> str:
    return os.getenv(_MODEL_ENV[provider], DEFAULT_MODELS[provider])


def build_llm(temperature: float = 0):
    """
    Return a LangChain chat model for the detected provider.

    Groq   → ChatGroq
    Azure  → AzureChatOpenAI (temperature omitted, o-series rejects it)
    OpenAI → ChatOpenAI

    The model must support with_structured_output() (routing) and
    bind_tools() (SQL agent).
    """
    provider = detect_provider()
    model    = model_name(provider)
    logger.info("[LLM] Provider: %s model: %s", provider, model)

    if provider == "groq":
        from langchain_groq import ChatGroq
        return ChatGroq(
            model=model,
            api_key=os.getenv("GROQ_API_KEY"),
            temperature=temperature,
        )

    if provider == "azure":
        from langchain_openai import AzureChatOpenAI
        return AzureChatOpenAI(
            azure_endpoint=os.getenv("AZURE_OPENAI_ENDPOINT"),
            azure_deployment=model,
            api_version=os.getenv("AZURE_OPENAI_API_VERSION", "2024-12-01-preview"),
            api_key=os.getenv("AZURE_OPENAI_API_KEY"),
        )

    from langchain_openai import ChatOpenAI
    return ChatOpenAI(
        model=model,
        api_key=os.getenv("OPENAI_API_KEY"),
        temperature=temperature,
    )
