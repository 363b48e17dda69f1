"""
Tests for task assignment
"""
import pytest
from httpx import AsyncClient


class TestCreateTask:

    @pytest.mark.asyncio
    async def test_create_task_with_names(
        self, client: AsyncClient, admin_user, admin_headers, test_user, other_user
    ):
        response = await client.post(
            '/tasks',
            json={
                'title': 'Write docs',
                'assigned_to_user_ids': [test_user.id, other_user.id, test_user.id],
                'reference_url': '',
            },
            headers=admin_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data['assigned_to_user_ids'] == [test_user.id, other_user.id]
        assert data['assigned_to_user_names'] == ['Bob', 'alice']
        assert data['assigned_by_user_name'] == 'Admin'
        assert data['status'] == 'To Do'
        assert data['reference_url'] is None

    @pytest.mark.asyncio
    async def test_project_name_is_filled(self, client: AsyncClient, test_user, auth_headers):
        project = await client.post(
            '/projects',
            json={'name': 'Landing page', 'type': 'Website', 'status': 'To Do'},
            headers=auth_headers,
        )
        response = await client.post(
            '/tasks',
            json={'title': 'Hero', 'assigned_to_user_ids': [test_user.id], 'project_id': project.json()['id']},
            headers=auth_headers,
        )

        assert response.json()['project_name'] == 'Landing page'

    @pytest.mark.asyncio
    async def test_unknown_assignee(self, client: AsyncClient, test_user, auth_headers):
        response = await client.post(
            '/tasks',
            json={'title': 'Write docs', 'assigned_to_user_ids': [test_user.id, 999]},
            headers=auth_headers,
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_needs_an_assignee(self, client: AsyncClient, auth_headers):
        response = await client.post('/tasks', json={'title': 'Write docs', 'assigned_to_user_ids': []}, headers=auth_headers)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_project(self, client: AsyncClient, test_user, auth_headers):
        response = await client.post(
            '/tasks',
            json={'title': 'Write docs', 'assigned_to_user_ids': [test_user.id], 'project_id': 999},
            headers=auth_headers,
        )
        assert response.status_code == 400


class TestListTasks:

    @pytest.mark.asyncio
    async def test_my_tasks_ordered_by_status_then_age(
        self, client: AsyncClient, test_user, other_user, admin_headers, auth_headers
    ):
        for title, status in [('a', 'Completed'), ('b', 'To Do'), ('c', 'Blocked'), ('d', 'To Do'), ('e', 'In Progress')]:
            await client.post(
                '/tasks',
                json={'title': title, 'assigned_to_user_ids': [test_user.id], 'status': status},
                headers=admin_headers,
            )
        await client.post('/tasks', json={'title': 'x', 'assigned_to_user_ids': [other_user.id]}, headers=admin_headers)

        response = await client.get('/tasks/me', headers=auth_headers)

        assert [t['title'] for t in response.json()] == ['b', 'd', 'e', 'c', 'a']

    @pytest.mark.asyncio
    async def test_all_tasks_admin_only(self, client: AsyncClient, test_user, admin_headers, auth_headers):
        await client.post('/tasks', json={'title': 'a', 'assigned_to_user_ids': [test_user.id]}, headers=admin_headers)

        assert (await client.get('/tasks', headers=auth_headers)).status_code == 403
        response = await client.get('/tasks', headers=admin_headers)
        assert [t['title'] for t in response.json()] == ['a']


class TestUpdateTask:

    @pytest.mark.asyncio
    async def test_assignee_updates_status(
        self, client: AsyncClient, test_user, admin_headers, auth_headers, other_headers
    ):
        created = await client.post('/tasks', json={'title': 'a', 'assigned_to_user_ids': [test_user.id]}, headers=admin_headers)
        task_id = created.json()['id']

        denied = await client.patch(f'/tasks/{task_id}/status', json={'status': 'Blocked'}, headers=other_headers)
        allowed = await client.patch(f'/tasks/{task_id}/status', json={'status': 'Blocked'}, headers=auth_headers)

        assert denied.status_code == 403
        assert allowed.status_code == 200
        assert allowed.json()['status'] == 'Blocked'

    @pytest.mark.asyncio
    async def test_invalid_status(self, client: AsyncClient, test_user, admin_headers):
        created = await client.post('/tasks', json={'title': 'a', 'assigned_to_user_ids': [test_user.id]}, headers=admin_headers)
        response = await client.patch(f'/tasks/{created.json()["id"]}/status', json={'status': 'Testing'}, headers=admin_headers)
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_delete_admin_only(self, client: AsyncClient, test_user, admin_headers, auth_headers):
        created = await client.post('/tasks', json={'title': 'a', 'assigned_to_user_ids': [test_user.id]}, headers=admin_headers)
        task_id = created.json()['id']

        assert (await client.delete(f'/tasks/{task_id}', headers=auth_headers)).status_code == 403
        assert (await client.delete(f'/tasks/{task_id}', headers=admin_headers)).status_code == 200
        assert (await client.delete(f'/tasks/{task_id}', headers=admin_headers)).status_code == 404
