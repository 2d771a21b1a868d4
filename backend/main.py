import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from ai_service import AIService, mask_api_key
from config import load_settings
from models import (
    ApiKeyStatus,
    ApiKeyUpdate,
    CategorizeRequest,
    CategorizeResult,
    CategoryFilter,
    GenerateRequest,
    GenerateResponse,
    InsightsResponse,
    StatusFilter,
    Task,
    TaskCreate,
    TaskStats,
    TaskUpdate,
)
from query import filter_tasks
from stats import compute_stats
from store import TaskStore, seed_sample_tasks

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: fresh in-memory state for every run
    settings = load_settings()
    setup_logging(settings.log_level)

    store = TaskStore()
    if settings.seed_sample_tasks:
        seed_sample_tasks(store)
    app.state.store = store
    app.state.ai = AIService(settings.ai)
    logger.info(
        "TaskFlow started with %d tasks (AI %s)",
        len(store),
        "enabled" if settings.ai.has_key else "offline",
    )
    yield
    # Shutdown
    await app.state.ai.aclose()


app = FastAPI(title="TaskFlow", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=load_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_store(request: Request) -> TaskStore:
    return request.app.state.store


def get_ai(request: Request) -> AIService:
    return request.app.state.ai


StoreDep = Annotated[TaskStore, Depends(get_store)]
AIDep = Annotated[AIService, Depends(get_ai)]


@app.get("/tasks")
def get_tasks(
    store: StoreDep,
    q: str = "",
    category: CategoryFilter = "all",
    status: StatusFilter = "all",
) -> list[Task]:
    return filter_tasks(store.get_all_tasks(), q, category, status)


@app.post("/tasks")
def create_task(task_data: TaskCreate, store: StoreDep) -> Task:
    return store.create_task(task_data)


@app.post("/tasks/batch")
def add_tasks(tasks: list[Task], store: StoreDep) -> list[Task]:
    """Add a batch of tasks, typically a generated preview the user accepted."""
    return store.add_tasks(tasks)


@app.patch("/tasks/{task_id}")
def update_task(task_id: str, task_data: TaskUpdate, store: StoreDep) -> Task:
    result = store.update_task(task_id, task_data)
    if not result:
        raise HTTPException(status_code=404, detail="Task not found")
    return result


@app.delete("/tasks/{task_id}")
def delete_task(task_id: str, store: StoreDep) -> dict:
    if not store.delete_task(task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return {"status": "deleted"}


@app.get("/stats")
def get_stats(store: StoreDep) -> TaskStats:
    return compute_stats(store.get_all_tasks())


@app.post("/ai/categorize")
async def categorize_task(categorize_request: CategorizeRequest, ai: AIDep) -> CategorizeResult:
    """Suggest category, priority and deadline for a task being written."""
    return await ai.categorize(categorize_request.title, categorize_request.description)


@app.post("/ai/generate")
async def generate_tasks(generate_request: GenerateRequest, store: StoreDep, ai: AIDep) -> GenerateResponse:
    """
    Generate a preview of tasks for a goal. Nothing is stored until the
    client posts the accepted tasks to /tasks/batch.
    """
    tasks, mode = await ai.generate_tasks(generate_request.goal, store.get_all_tasks())
    if mode == "offline":
        message = f"Generated {len(tasks)} tasks using offline mode!"
    else:
        message = f"Generated {len(tasks)} smart tasks!"
    return GenerateResponse(tasks=tasks, mode=mode, message=message)


@app.get("/ai/insights")
async def get_insights(store: StoreDep, ai: AIDep) -> InsightsResponse:
    tasks = store.get_all_tasks()
    if not tasks:
        return InsightsResponse()

    insights, next_actions = await asyncio.gather(
        ai.generate_insights(tasks),
        ai.suggest_next_actions(tasks),
    )
    return InsightsResponse(insights=insights, next_actions=next_actions)


@app.get("/settings/api-key")
def get_api_key_status(ai: AIDep) -> ApiKeyStatus:
    return ApiKeyStatus(configured=ai.api_key is not None, masked_key=mask_api_key(ai.api_key))


@app.put("/settings/api-key")
async def set_api_key(update: ApiKeyUpdate, ai: AIDep) -> ApiKeyStatus:
    """Set the AI key for this session; an empty key switches to offline mode."""
    await ai.set_api_key(update.api_key)
    return get_api_key_status(ai)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
