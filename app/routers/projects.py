from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from datetime import datetime, timezone
from typing import List
import logging

from app.ai.flows import AIFlowError, recommend_project_resources
from app.ai.provider import BaseProvider, get_ai_provider
from app.database import get_db
from app.core.auth import get_current_user, get_current_admin
from app.models.project import Project, ProjectStarter
from app.schemas.project import (
    ProjectCreate, ProjectStatusUpdate, ProjectResponse,
    ProjectStarterCreate, ProjectStarterResponse,
    ProjectResourceRecommendations, SuggestedResourceItem,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])
starters_router = APIRouter(prefix="/project-starters", tags=["projects"])


def to_resource_items(items: List[str], split_titles: bool = False) -> List[SuggestedResourceItem]:
    """
    Case studies come back as "Title: description" and are split at the first
    ": ". Everything else becomes a plain item, with ``url`` set for links.
    """
    resources = []
    for item in items:
        parts = item.split(": ")
        if split_titles and len(parts) > 1:
            resources.append(SuggestedResourceItem(name=parts[0], description=": ".join(parts[1:])))
        else:
            resources.append(SuggestedResourceItem(name=item, url=item if item.startswith("http") else None))
    return resources


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    query = select(Project)
    if not current_user.is_admin:
        query = query.where(Project.user_id == current_user.id)
    result = await db.execute(query.order_by(Project.created_at.desc(), Project.id.desc()))
    return result.scalars().all()


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_in: ProjectCreate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    if project_in.project_starter_id is not None:
        starter = await db.execute(
            select(ProjectStarter).where(ProjectStarter.id == project_in.project_starter_id)
        )
        if not starter.scalar_one_or_none():
            raise HTTPException(400, "Project starter not found")

    project = Project(
        user_id=current_user.id,
        name=project_in.name,
        type=project_in.type,
        status=project_in.status,
        link=str(project_in.link) if project_in.link else None,
        test_link=str(project_in.test_link) if project_in.test_link else None,
        document_url=str(project_in.document_url) if project_in.document_url else None,
        description=project_in.description,
        project_starter_id=project_in.project_starter_id,
        completed_at=datetime.now(timezone.utc) if project_in.status == "Completed" else None,
    )
    db.add(project)
    await db.commit()
    await db.refresh(project)
    return project


@router.get("/recommendations", response_model=ProjectResourceRecommendations)
async def get_project_recommendations(
    project_type: str,
    current_user = Depends(get_current_user),
    provider: BaseProvider = Depends(get_ai_provider)
):
    try:
        resources = await recommend_project_resources(provider, project_type)
    except AIFlowError as e:
        logger.error("AI recommendation for project resources failed: %s", e)
        raise HTTPException(502, "Failed to get project resource recommendations.")

    return ProjectResourceRecommendations(
        suggested_tools=to_resource_items(resources.suggested_tools),
        case_studies=to_resource_items(resources.case_studies, split_titles=True),
        reference_links=to_resource_items(resources.reference_links),
        prompt_examples=resources.prompt_examples,
    )


async def _get_owned_project(db: AsyncSession, project_id: int, current_user) -> Project:
    result = await db.execute(select(Project).where(Project.id == project_id))
    project = result.scalar_one_or_none()
    if not project:
        raise HTTPException(404, "Project not found.")
    if project.user_id != current_user.id and not current_user.is_admin:
        raise HTTPException(403, "Unauthorized to modify this project.")
    return project


@router.patch("/{project_id}/status", response_model=ProjectResponse)
async def update_project_status(
    project_id: int,
    status_in: ProjectStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    project = await _get_owned_project(db, project_id, current_user)

    project.status = status_in.status
    if status_in.status == "Completed":
        if not project.completed_at:
            project.completed_at = datetime.now(timezone.utc)
    else:
        project.completed_at = None

    db.add(project)
    await db.commit()
    await db.refresh(project)
    return project


@router.delete("/{project_id}")
async def delete_project(
    project_id: int,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    project = await _get_owned_project(db, project_id, current_user)
    await db.delete(project)
    await db.commit()
    return {"message": "Project deleted."}


@starters_router.get("", response_model=List[ProjectStarterResponse])
async def list_project_starters(
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    result = await db.execute(
        select(ProjectStarter).order_by(ProjectStarter.created_at.desc(), ProjectStarter.id.desc())
    )
    return result.scalars().all()


@starters_router.post("", response_model=ProjectStarterResponse, status_code=status.HTTP_201_CREATED)
async def create_project_starter(
    starter_in: ProjectStarterCreate,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    starter = ProjectStarter(
        title=starter_in.title,
        description=starter_in.description,
        created_by_admin_id=admin.id,
    )
    db.add(starter)
    await db.commit()
    await db.refresh(starter)
    return starter
