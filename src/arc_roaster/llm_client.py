import asyncio
import json
from typing import Any, Protocol

import boto3
import httpx
from botocore.exceptions import BotoCoreError, ClientError

from .errors import EmptyGeneration, UpstreamUnavailable, describe_error
from .settings import Settings
from .timeouts import bounded


class RoastGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


def extract_text(payload: Any) -> str | None:
    content = payload.get('content') if isinstance(payload, dict) else None
    if not isinstance(content, list) or not content:
        return None
    first = content[0]
    text = first.get('text') if isinstance(first, dict) else None
    return text if isinstance(text, str) and text else None


def _upstream_status_error(status: int, body: str) -> UpstreamUnavailable:
    return UpstreamUnavailable(f'Claude error {status}: {body[:200]}')


class AnthropicGenerator:
    """Single-turn call to the Anthropic Messages API."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings) -> None:
        self.client = client
        self.settings = settings

    async def _post(self, prompt: str) -> httpx.Response:
        headers = {
            'Content-Type': 'application/json',
            'anthropic-version': self.settings.anthropic_version,
        }
        if self.settings.anthropic_api_key:
            headers['x-api-key'] = self.settings.anthropic_api_key
        body = {
            'model': self.settings.anthropic_model,
            'max_tokens': self.settings.anthropic_max_tokens,
            'messages': [{'role': 'user', 'content': prompt}],
        }
        endpoint = f'{self.settings.anthropic_api_url.rstrip("/")}/v1/messages'
        return await self.client.post(endpoint, headers=headers, json=body)

    async def generate(self, prompt: str) -> str:
        try:
            response = await bounded(self._post(prompt), self.settings.llm_timeout_seconds)
        except (httpx.HTTPError, TimeoutError) as exc:
            raise UpstreamUnavailable(f'Claude request failed: {describe_error(exc)}') from exc
        if not response.is_success:
            raise _upstream_status_error(response.status_code, response.text)
        try:
            payload = response.json()
        except ValueError:
            payload = None
        text = extract_text(payload)
        if text is None:
            raise EmptyGeneration('Empty roast from Claude')
        return text


class BedrockGenerator:
    """Same request shape routed through Bedrock ``invoke_model``."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def _invoke(self, prompt: str) -> dict:
        client = boto3.client(
            'bedrock-runtime',
            region_name=self.settings.aws_region,
            aws_access_key_id=self.settings.aws_access_key_id,
            aws_secret_access_key=self.settings.aws_secret_access_key,
            aws_session_token=self.settings.aws_session_token,
        )
        body = {
            'anthropic_version': 'bedrock-2023-05-31',
            'max_tokens': self.settings.anthropic_max_tokens,
            'messages': [{'role': 'user', 'content': [{'type': 'text', 'text': prompt}]}],
        }
        response = client.invoke_model(
            modelId=self.settings.bedrock_model_id,
            contentType='application/json',
            accept='application/json',
            body=json.dumps(body),
        )
        return json.loads(response['body'].read())

    async def generate(self, prompt: str) -> str:
        try:
            payload = await bounded(
                asyncio.to_thread(self._invoke, prompt), self.settings.llm_timeout_seconds
            )
        except ClientError as exc:
            status = exc.response.get('ResponseMetadata', {}).get('HTTPStatusCode', 500)
            message = exc.response.get('Error', {}).get('Message') or str(exc)
            raise _upstream_status_error(status, message) from exc
        except (BotoCoreError, TimeoutError) as exc:
            raise UpstreamUnavailable(f'Claude request failed: {describe_error(exc)}') from exc
        text = extract_text(payload)
        if text is None:
            raise EmptyGeneration('Empty roast from Claude')
        return text


def build_generator(settings: Settings, client: httpx.AsyncClient) -> RoastGenerator:
    if settings.llm_provider == 'bedrock':
        return BedrockGenerator(settings)
    return AnthropicGenerator(client, settings)
