import logging
from typing import List

from fastapi import APIRouter, Depends

from smartsync.deps import get_current_user_id
from smartsync.models.task import Task
from smartsync.repositories import TaskRepository, get_tasks
from smartsync.schemas.task import TaskCreate, TaskOut, TaskUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get("", response_model=List[TaskOut])
def list_tasks(user_id: str = Depends(get_current_user_id), tasks: TaskRepository = Depends(get_tasks)):
    """Tasks of the caller ordered by due date, undated ones last."""
    return tasks.list_for(user_id)


@router.post("")
def create_task(task: TaskCreate, user_id: str = Depends(get_current_user_id), tasks: TaskRepository = Depends(get_tasks)):
    tasks.add(Task(
        id=task.id,
        user_id=user_id,
        text=task.text,
        priority=task.priority,
        due_date=task.due_date,
        google_event_id=task.google_event_id,
        reminder_type=task.reminder_type,
        reminder_timing=task.reminder_timing,
        contact_info=task.contact_info,
    ))
    return {"success": True}


@router.put("/{task_id}")
def update_task(task_id: str, body: TaskUpdate, user_id: str = Depends(get_current_user_id), tasks: TaskRepository = Depends(get_tasks)):
    # other users' ids match nothing and still succeed
    if not tasks.set_completed(user_id, task_id, body.completed):
        logger.debug("No task %s for user %s to update", task_id, user_id)
    return {"success": True}


@router.delete("/{task_id}")
def delete_task(task_id: str, user_id: str = Depends(get_current_user_id), tasks: TaskRepository = Depends(get_tasks)):
    if not tasks.delete(user_id, task_id):
        logger.debug("No task %s for user %s to delete", task_id, user_id)
    return {"success": True}
