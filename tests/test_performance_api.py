"""
Tests for the performance HTTP endpoints
"""
from datetime import date

import pytest
from httpx import AsyncClient

from app.services.performance import get_fridays_of_month


def score_payload(score, week='2024-02-09', month=2, year=2024) -> dict:
    return {'year': year, 'month': month, 'week_start_date': week, 'score': score}


class TestWeeklyScoreUpdate:

    @pytest.mark.asyncio
    async def test_admin_sets_score(self, client: AsyncClient, admin_headers, test_user):
        response = await client.put(f'/performance/{test_user.id}/weekly-score', json=score_payload(4), headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {'success': True, 'message': 'Score updated.'}

        grid = await client.get('/performance', params={'month': 2, 'year': 2024}, headers=admin_headers)
        weeks = grid.json()[0]['weekly_scores']
        assert weeks[1] == {'week_start_date': '2024-02-09', 'score': 4}

    @pytest.mark.asyncio
    async def test_out_of_range_score(self, client: AsyncClient, admin_headers, test_user):
        response = await client.put(f'/performance/{test_user.id}/weekly-score', json=score_payload(6), headers=admin_headers)

        assert response.status_code == 400
        assert response.json()['detail'] == 'Score must be between 1 and 5, or null.'

    @pytest.mark.asyncio
    @pytest.mark.parametrize('score', [True, 3.5, '4'])
    async def test_non_integer_score(self, client: AsyncClient, admin_headers, test_user, score):
        response = await client.put(f'/performance/{test_user.id}/weekly-score', json=score_payload(score), headers=admin_headers)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_clear_score(self, client: AsyncClient, admin_headers, test_user):
        await client.put(f'/performance/{test_user.id}/weekly-score', json=score_payload(4), headers=admin_headers)
        response = await client.put(f'/performance/{test_user.id}/weekly-score', json=score_payload(None), headers=admin_headers)
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_bad_month_in_body(self, client: AsyncClient, admin_headers, test_user):
        response = await client.put(
            f'/performance/{test_user.id}/weekly-score',
            json=score_payload(3, month=13),
            headers=admin_headers,
        )
        assert response.status_code == 422

    @pytest.mark.asyncio
    @pytest.mark.parametrize('week', ['2031-07-01', '2024-02-12', '2024-03-01'])
    async def test_week_not_a_friday_of_the_month(self, client: AsyncClient, admin_headers, test_user, week):
        response = await client.put(
            f'/performance/{test_user.id}/weekly-score',
            json=score_payload(3, week=week),
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()['detail'] == 'Week must be a Friday of the selected month.'

        grid = await client.get('/performance', params={'month': 2, 'year': 2024}, headers=admin_headers)
        assert len(grid.json()[0]['weekly_scores']) == 4

    @pytest.mark.asyncio
    async def test_admins_are_not_scored(self, client: AsyncClient, admin_user, admin_headers):
        response = await client.put(f'/performance/{admin_user.id}/weekly-score', json=score_payload(3), headers=admin_headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_staff_cannot_score(self, client: AsyncClient, auth_headers, test_user):
        response = await client.put(f'/performance/{test_user.id}/weekly-score', json=score_payload(5), headers=auth_headers)
        assert response.status_code == 403


class TestMonthViews:

    @pytest.mark.asyncio
    async def test_grid_sorted_by_name(self, client: AsyncClient, admin_headers, test_user, other_user):
        response = await client.get('/performance', params={'month': 5, 'year': 2024}, headers=admin_headers)

        assert response.status_code == 200
        assert [p['user_name'] for p in response.json()] == ['alice', 'Bob']
        assert len(response.json()[0]['weekly_scores']) == 5

    @pytest.mark.asyncio
    async def test_invalid_month_query(self, client: AsyncClient, admin_headers):
        response = await client.get('/performance', params={'month': 13, 'year': 2024}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json()['detail'] == 'Invalid month'

    @pytest.mark.asyncio
    async def test_leaderboard(self, client: AsyncClient, admin_headers, auth_headers, test_user, other_user):
        await client.put(f'/performance/{test_user.id}/weekly-score', json=score_payload(5), headers=admin_headers)
        await client.put(
            f'/performance/{other_user.id}/weekly-score',
            json=score_payload(3, week='2024-02-16'),
            headers=admin_headers,
        )

        response = await client.get('/performance/leaderboard', params={'month': 2, 'year': 2024}, headers=auth_headers)

        assert response.status_code == 200
        assert [(e['user_name'], e['score'], e['rank']) for e in response.json()] == [
            ('Bob', 5.0, 1),
            ('alice', 3.0, 2),
        ]

    @pytest.mark.asyncio
    async def test_my_performance_defaults_to_this_month(self, client: AsyncClient, auth_headers, test_user):
        today = date.today()

        response = await client.get('/performance/me', headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert (data['year'], data['month']) == (today.year, today.month)
        assert [w['week_start_date'] for w in data['weekly_scores']] == [
            d.isoformat() for d in get_fridays_of_month(today.year, today.month)
        ]
