"""
Tests for the AI prompt wrappers and provider
"""
import pytest
from httpx import AsyncClient

from app.ai.flows import (
    AIFlowError,
    DailyWisdom,
    autocomplete_link_title,
    generate_daily_wisdom,
    recommend_project_resources,
    run_prompt,
)
from app.ai.provider import GeminiProvider


class TestRunPrompt:

    @pytest.mark.asyncio
    async def test_parses_json_answer(self, fake_provider):
        fake_provider.set_response('oracle', {'wisdom': 'Ship small.'})

        result = await generate_daily_wisdom(fake_provider)

        assert result == DailyWisdom(wisdom='Ship small.')

    @pytest.mark.asyncio
    async def test_strips_code_fence(self, fake_provider):
        fake_provider.set_response('anything', '```json\n{"wisdom": "Rest."}\n```')

        result = await run_prompt(fake_provider, 'anything goes', DailyWisdom)

        assert result.wisdom == 'Rest.'

    @pytest.mark.asyncio
    async def test_provider_failure_raises(self, fake_provider):
        fake_provider.fail_with = 'Timeout'

        with pytest.raises(AIFlowError, match='Timeout'):
            await autocomplete_link_title(fake_provider, 'https://example.com')

    @pytest.mark.asyncio
    async def test_schema_mismatch_raises(self, fake_provider):
        fake_provider.set_response('Project Type', {'suggested_tools': 'not a list'})

        with pytest.raises(AIFlowError):
            await recommend_project_resources(fake_provider, 'Mobile app')

    @pytest.mark.asyncio
    async def test_non_json_raises(self, fake_provider):
        fake_provider.set_response('title autocompletion', 'Here is your title: Example')

        with pytest.raises(AIFlowError):
            await autocomplete_link_title(fake_provider, 'https://example.com')


class TestGeminiProvider:

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        provider = GeminiProvider(api_key=None, model='gemini-1.5-flash')

        result = await provider.generate('hello')

        assert result['status'] == 'failed'
        assert result['provider'] == 'gemini'
        assert result['model'] == 'gemini-1.5-flash'
        assert 'GEMINI_API_KEY' in result['error']


class TestDailyWisdomEndpoint:

    @pytest.mark.asyncio
    async def test_daily_wisdom(self, client: AsyncClient, auth_headers, fake_provider):
        fake_provider.set_response('oracle', {'wisdom': 'Ship small.'})

        response = await client.get('/ai/daily-wisdom', headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {'wisdom': 'Ship small.'}

    @pytest.mark.asyncio
    async def test_daily_wisdom_failure(self, client: AsyncClient, auth_headers, fake_provider):
        fake_provider.fail_with = 'quota exceeded'

        response = await client.get('/ai/daily-wisdom', headers=auth_headers)

        assert response.status_code == 502
