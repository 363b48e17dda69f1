from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Dict, List

from app.database import get_db
from app.core.auth import get_current_user, get_current_admin
from app.models.project import Project
from app.models.task import Task
from app.models.user import User
from app.schemas.task import TaskCreate, TaskStatusUpdate, TaskResponse

router = APIRouter(prefix="/tasks", tags=["tasks"])

STATUS_ORDER = {"To Do": 1, "In Progress": 2, "Blocked": 3, "Completed": 4}


async def _lookups(db: AsyncSession):
    users = await db.execute(select(User.id, User.name))
    projects = await db.execute(select(Project.id, Project.name))
    return dict(users.fetchall()), dict(projects.fetchall())


def enrich_task(task: Task, user_names: Dict[int, str], project_names: Dict[int, str]) -> TaskResponse:
    response = TaskResponse.model_validate(task)
    response.assigned_to_user_names = [
        user_names[uid] for uid in task.assigned_to_user_ids if uid in user_names
    ]
    if task.assigned_by_user_id is not None:
        response.assigned_by_user_name = user_names.get(
            task.assigned_by_user_id, str(task.assigned_by_user_id)
        )
    if task.project_id is not None:
        response.project_name = project_names.get(task.project_id)
    return response


@router.get("", response_model=List[TaskResponse])
async def admin_list_tasks(
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    result = await db.execute(select(Task).order_by(Task.created_at.desc(), Task.id.desc()))
    user_names, project_names = await _lookups(db)
    return [enrich_task(t, user_names, project_names) for t in result.scalars()]


@router.get("/me", response_model=List[TaskResponse])
async def get_my_tasks(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    # JSON list column; filter in Python so it works on every backend
    result = await db.execute(select(Task).order_by(Task.created_at, Task.id))
    tasks = [t for t in result.scalars() if current_user.id in (t.assigned_to_user_ids or [])]
    tasks.sort(key=lambda t: STATUS_ORDER.get(t.status, len(STATUS_ORDER) + 1))  # stable: keeps oldest first

    user_names, project_names = await _lookups(db)
    return [enrich_task(t, user_names, project_names) for t in tasks]


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_in: TaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    assignee_ids = list(dict.fromkeys(task_in.assigned_to_user_ids))

    # Ensure every assignee exists
    found = await db.execute(select(User.id).where(User.id.in_(assignee_ids)))
    missing = set(assignee_ids) - {row[0] for row in found.fetchall()}
    if missing:
        raise HTTPException(400, f"Assigned user not found: {sorted(missing)}")

    if task_in.project_id is not None:
        project = await db.execute(select(Project).where(Project.id == task_in.project_id))
        if not project.scalar_one_or_none():
            raise HTTPException(400, "Project not found")

    task = Task(
        title=task_in.title,
        description=task_in.description,
        reference_url=str(task_in.reference_url) if task_in.reference_url else None,
        assigned_to_user_ids=assignee_ids,
        assigned_by_user_id=current_user.id,
        project_id=task_in.project_id,
        status=task_in.status,
        due_date=task_in.due_date,
    )
    db.add(task)
    await db.commit()
    await db.refresh(task)

    user_names, project_names = await _lookups(db)
    return enrich_task(task, user_names, project_names)


@router.patch("/{task_id}/status", response_model=TaskResponse)
async def update_task_status(
    task_id: int,
    status_in: TaskStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(select(Task).where(Task.id == task_id))
    task = result.scalar_one_or_none()
    if not task:
        raise HTTPException(404, "Task not found.")
    if current_user.id not in (task.assigned_to_user_ids or []) and not current_user.is_admin:
        raise HTTPException(403, "Not authorized to update this task.")

    task.status = status_in.status
    db.add(task)
    await db.commit()
    await db.refresh(task)

    user_names, project_names = await _lookups(db)
    return enrich_task(task, user_names, project_names)


@router.delete("/{task_id}")
async def delete_task(
    task_id: int,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    result = await db.execute(select(Task).where(Task.id == task_id))
    task = result.scalar_one_or_none()
    if not task:
        raise HTTPException(404, "Task not found.")
    await db.delete(task)
    await db.commit()
    return {"message": "Task deleted."}
