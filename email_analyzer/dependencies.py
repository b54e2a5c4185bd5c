import logging
from contextlib import asynccontextmanager
from typing import Dict

from fastapi import Depends, FastAPI
from openai import AsyncOpenAI

from email_analyzer.assistants.runner import AssistantRunner
from email_analyzer.config import Settings, get_settings

logger = logging.getLogger(__name__)

# Process-wide OpenAI clients, one per (frozen) configuration
_openai_clients: Dict[Settings, AsyncOpenAI] = {}


def get_openai_client(settings: Settings) -> AsyncOpenAI:
    client = _openai_clients.get(settings)
    if client is None:
        client = _openai_clients[settings] = AsyncOpenAI(api_key=settings.openai_api_key)
    return client


async def close_openai_clients() -> None:
    while _openai_clients:
        _, client = _openai_clients.popitem()
        await client.close()
        logger.info("OpenAI client closed")


def get_runner(settings: Settings = Depends(get_settings)) -> AssistantRunner:
    # One runner per request; the shared client is only built once it is needed
    return AssistantRunner(settings, client_factory=get_openai_client)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_openai_clients()
