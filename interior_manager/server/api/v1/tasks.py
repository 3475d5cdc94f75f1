"""
Project step and task endpoints.

Steps group the work of a project per workflow stage; tasks live inside a
step and are assigned to employees. Access to both is checked through the
owning project. Task changes notify the project creator and the assignee.
"""

from typing import Dict, List, Optional

from fastapi import APIRouter, Query, status

from interior_manager.core.database.base import utc_now
from interior_manager.core.database.entities.projects import Project
from interior_manager.core.database.entities.tasks import ProjectStep, ProjectStepTask, TaskActivity
from interior_manager.core.database.entities.users import User
from interior_manager.core.database.repositories.tasks import (
    ProjectStepRepository,
    TaskActivityRepository,
    TaskRepository,
)
from interior_manager.core.database.repositories.users import UserRepository
from interior_manager.core.errors import NotFoundError, PermissionDeniedError
from interior_manager.core.logging_config import get_logger
from interior_manager.core.models.domain.enums import NotificationType, PermissionNode, TaskActivityType, TaskStatus
from interior_manager.core.models.io.auth import UserRef
from interior_manager.core.models.io.tasks import (
    ProjectStepCreate,
    ProjectStepRead,
    ProjectStepUpdate,
    TaskActivityCreate,
    TaskActivityList,
    TaskActivityRead,
    TaskActivityResponse,
    TaskBulkResult,
    TaskBulkUpdate,
    TaskCreate,
    TaskRead,
    TaskUpdate,
)
from interior_manager.server.services.access import check_project_access, require_project_access
from interior_manager.server.services.deps import CurrentUser, NotificationServiceDep, RBACDep, SessionDep

logger = get_logger(__name__)

steps_router = APIRouter(tags=["project-steps"])
router = APIRouter(tags=["tasks"])

STATUS_VERBS = {
    TaskStatus.done.value: "completed",
    TaskStatus.in_progress.value: "started working on",
    TaskStatus.blocked.value: "marked as blocked",
}


async def _load_step(session, user: User, step_id: str) -> tuple[ProjectStep, Project]:
    step = await ProjectStepRepository(session).get_by_id(step_id)
    if step is None:
        raise NotFoundError("Step not found")
    project = await require_project_access(session, user, step.project_id)
    return step, project


async def _load_task(session, user: User, task_id: str) -> tuple[ProjectStepTask, ProjectStep, Project]:
    task = await TaskRepository(session).get_by_id(task_id)
    if task is None:
        raise NotFoundError("Task not found")
    step, project = await _load_step(session, user, task.step_id)
    return task, step, project


def _text(value) -> Optional[str]:
    return None if value is None else str(value)


def _record_changes(
    activity: TaskActivityRepository, task: ProjectStepTask, user_id: str, changes: Dict[str, object]
) -> None:
    """Stage activity rows for ``changes`` before they are applied to ``task``."""
    other = []
    for key, value in changes.items():
        previous = getattr(task, key)
        if previous == value:
            continue
        if key == "status":
            activity.record(task.id, user_id, TaskActivityType.status_changed.value, previous, _text(value))
        elif key == "assigned_to":
            activity.record(task.id, user_id, TaskActivityType.assigned.value, previous, _text(value))
        elif key == "estimated_completion_date":
            activity.record(task.id, user_id, TaskActivityType.due_date_changed.value, _text(previous), _text(value))
        else:
            other.append(key)
    if other:
        activity.record(task.id, user_id, TaskActivityType.updated.value, comment=f"Updated {', '.join(other)}")


async def _with_authors(session, entries: List[TaskActivity]) -> List[TaskActivityRead]:
    authors = {u.id: u for u in await UserRepository(session).get_many(list({e.user_id for e in entries}))}
    result = []
    for entry in entries:
        read = TaskActivityRead.model_validate(entry)
        author = authors.get(entry.user_id)
        read.user = UserRef.model_validate(author) if author else None
        result.append(read)
    return result


# Project steps


@steps_router.get(
    "",
    response_model=List[ProjectStepRead],
    summary="List Project Steps",
    description="List the steps of a project ordered by stage, then sort order.",
)
async def list_steps(
    user: CurrentUser, session: SessionDep, project_id: str = Query(description="Project to list steps for")
) -> List[ProjectStepRead]:
    await require_project_access(session, user, project_id)
    steps = await ProjectStepRepository(session).list_for_project(project_id)
    return [ProjectStepRead.model_validate(step) for step in steps]


@steps_router.post(
    "",
    response_model=ProjectStepRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Project Step",
)
async def create_step(payload: ProjectStepCreate, user: CurrentUser, session: SessionDep) -> ProjectStepRead:
    await require_project_access(session, user, payload.project_id)
    step = await ProjectStepRepository(session).create(ProjectStep(**payload.model_dump()))
    return ProjectStepRead.model_validate(step)


@steps_router.patch(
    "/{step_id}",
    response_model=ProjectStepRead,
    summary="Update Project Step",
    responses={404: {"description": "Step not found"}},
)
async def update_step(
    step_id: str, payload: ProjectStepUpdate, user: CurrentUser, session: SessionDep
) -> ProjectStepRead:
    step, _ = await _load_step(session, user, step_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(step, key, value)
    step = await ProjectStepRepository(session).update(step)
    return ProjectStepRead.model_validate(step)


@steps_router.delete(
    "/{step_id}",
    summary="Delete Project Step",
    description="Delete a step together with its tasks.",
    responses={404: {"description": "Step not found"}},
)
async def delete_step(step_id: str, user: CurrentUser, session: SessionDep):
    step, _ = await _load_step(session, user, step_id)
    await ProjectStepRepository(session).delete_with_tasks(step.id)
    logger.info(f"Project step deleted: {step.id} by {user.id}")
    return {"success": True}


# Tasks


@router.get(
    "",
    response_model=List[TaskRead],
    summary="List Tasks",
    description="List the tasks of a step, oldest first.",
    responses={403: {"description": "Access denied or step not found"}},
)
async def list_tasks(
    user: CurrentUser, session: SessionDep, step_id: str = Query(description="Step to list tasks for")
) -> List[TaskRead]:
    step = await ProjectStepRepository(session).get_by_id(step_id)
    if step is None:
        raise PermissionDeniedError("Step not found")
    await require_project_access(session, user, step.project_id)
    tasks = await TaskRepository(session).list_for_step(step_id)
    return [TaskRead.model_validate(task) for task in tasks]


@router.get(
    "/mine",
    response_model=List[TaskRead],
    summary="My Tasks",
    description="List tasks assigned to the caller across all projects, newest first.",
)
async def my_tasks(user: CurrentUser, session: SessionDep) -> List[TaskRead]:
    tasks = await TaskRepository(session).list_for_assignee(user.id)
    return [TaskRead.model_validate(task) for task in tasks]


@router.post(
    "",
    response_model=TaskRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a task in a step. The project creator and the assignee are notified.",
    responses={404: {"description": "Step not found"}},
)
async def create_task(
    payload: TaskCreate, user: CurrentUser, session: SessionDep, notifications: NotificationServiceDep
) -> TaskRead:
    """
    Create a task.

    - **step_id**: the step the task belongs to.
    - **title**: 1 to 500 characters.
    - **assigned_to**: optional assignee; notified when it is not the creator.
    """
    step, project = await _load_step(session, user, payload.step_id)
    task = await TaskRepository(session).create(ProjectStepTask(**payload.model_dump(), created_by=user.id))
    TaskActivityRepository(session).record(task.id, user.id, TaskActivityType.created.value, new_value=task.title)
    await session.commit()
    logger.info(f"Task created: {task.id} in step {step.id} by {user.id}")

    if project.created_by and project.created_by != user.id:
        await notifications.create_notification(
            project.created_by,
            "New Task Created",
            f'{user.full_name} created task "{task.title}" in step "{step.title}" for project "{project.title}"',
            NotificationType.task_assigned,
            step.id,
            "project_step",
        )
    if task.assigned_to and task.assigned_to != user.id:
        await notifications.notify_task_assigned(task.assigned_to, task.title, project.title, task.id)
    return TaskRead.model_validate(task)


@router.patch(
    "/{task_id}",
    response_model=TaskRead,
    summary="Update Task",
    description="Partially update a task. Status and assignee changes send notifications.",
    responses={404: {"description": "Task not found"}},
)
async def update_task(
    task_id: str, payload: TaskUpdate, user: CurrentUser, session: SessionDep, notifications: NotificationServiceDep
) -> TaskRead:
    task, step, project = await _load_task(session, user, task_id)
    changes = payload.model_dump(exclude_unset=True)
    previous_status = task.status
    previous_assignee = task.assigned_to

    _record_changes(TaskActivityRepository(session), task, user.id, changes)
    for key, value in changes.items():
        setattr(task, key, value)
    task.updated_at = utc_now()
    task = await TaskRepository(session).update(task)

    new_status: Optional[str] = changes.get("status")
    status_changed = new_status is not None and new_status != previous_status

    if status_changed and new_status != TaskStatus.todo.value and project.created_by and project.created_by != user.id:
        await notifications.create_notification(
            project.created_by,
            "Task Status Updated",
            f'{user.full_name} {STATUS_VERBS.get(new_status, "updated")} task "{task.title}" in project "{project.title}"',
            NotificationType.project_update,
            step.id,
            "project_step",
        )
    if status_changed and task.assigned_to and task.assigned_to != user.id:
        await notifications.create_notification(
            task.assigned_to,
            "Task Status Updated",
            f'Task "{task.title}" status changed to {task.status}',
            NotificationType.project_update,
            task.id,
            "task",
        )
    if task.assigned_to and task.assigned_to != previous_assignee and task.assigned_to != user.id:
        await notifications.notify_task_assigned(task.assigned_to, task.title, project.title, task.id)

    return TaskRead.model_validate(task)


@router.delete(
    "/{task_id}",
    summary="Delete Task",
    responses={404: {"description": "Task not found"}},
)
async def delete_task(task_id: str, user: CurrentUser, session: SessionDep):
    task, _, _ = await _load_task(session, user, task_id)
    await TaskRepository(session).delete_with_activity(task.id)
    return {"success": True}


@router.get(
    "/{task_id}/activity",
    response_model=TaskActivityList,
    summary="Task Activity",
    description="Timeline of a task, newest entry first, with the author of each entry.",
    responses={404: {"description": "Task not found"}},
)
async def task_activity(task_id: str, user: CurrentUser, session: SessionDep) -> TaskActivityList:
    task, _, _ = await _load_task(session, user, task_id)
    entries = await TaskActivityRepository(session).list_for_task(task.id)
    return TaskActivityList(activities=await _with_authors(session, entries))


@router.post(
    "/{task_id}/activity",
    response_model=TaskActivityResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log Task Activity",
    description="Append an entry (usually a comment) to a task's timeline.",
    responses={404: {"description": "Task not found"}},
)
async def log_task_activity(
    task_id: str, payload: TaskActivityCreate, user: CurrentUser, session: SessionDep
) -> TaskActivityResponse:
    task, _, _ = await _load_task(session, user, task_id)
    values = {key: value or None for key, value in payload.model_dump(exclude={"activity_type"}).items()}
    entry = await TaskActivityRepository(session).create(
        TaskActivity(task_id=task.id, user_id=user.id, activity_type=payload.activity_type, **values)
    )
    logger.info(f"Task activity {entry.activity_type} logged on {task.id} by {user.id}")
    (read,) = await _with_authors(session, [entry])
    return TaskActivityResponse(activity=read)


@router.post(
    "/bulk",
    response_model=TaskBulkResult,
    summary="Bulk Update Task Status",
    description="Set the status of many tasks at once. Tasks in projects the caller cannot access are skipped.",
)
async def bulk_update_tasks(payload: TaskBulkUpdate, user: CurrentUser, rbac: RBACDep, session: SessionDep) -> TaskBulkResult:
    await rbac.verify_permission(user, PermissionNode.tasks_bulk)

    tasks = await TaskRepository(session).get_many(payload.task_ids)
    step_repository = ProjectStepRepository(session)
    activity = TaskActivityRepository(session)
    access: Dict[str, bool] = {}

    changed = []
    for task in tasks:
        step = await step_repository.get_by_id(task.step_id)
        if step is None:
            continue
        if step.project_id not in access:
            access[step.project_id] = await check_project_access(session, user, step.project_id)
        if not access[step.project_id]:
            continue
        if task.status != payload.status:
            activity.record(task.id, user.id, TaskActivityType.status_changed.value, task.status, payload.status)
        task.status = payload.status
        task.updated_at = utc_now()
        changed.append(task)

    updated = await TaskRepository(session).update_many(changed)
    logger.info(f"Bulk task update by {user.id}: {updated}/{len(payload.task_ids)} set to {payload.status}")
    return TaskBulkResult(updated=updated)
