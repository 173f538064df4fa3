from contextlib import asynccontextmanager
from fastapi import FastAPI, HTTPException, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import uuid
import os
from dotenv import load_dotenv

from errors import InvalidInput, TodoAIError
from extractor import parse_todo
from models import ExtractedTodo, ParseTodoRequest, Todo, TodoCreate, TodoUpdate
from database import (
    init_db,
    get_all_todos,
    create_todo_db,
    update_todo_db,
    delete_todo_db,
)

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

PARSE_TODO_PATH = "/ai/parse-todo"

@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Startup
    init_db()
    yield
    # Shutdown (nothing to do)

app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv("CORS_ORIGINS", "http://localhost:3000").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TodoAIError)
async def todo_ai_error_handler(_request: Request, exc: TodoAIError) -> JSONResponse:
    logger.info("Parse request failed: %s (%s)", type(exc).__name__, exc)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # A missing or non-object body on the parse route is just invalid input
    if request.url.path == PARSE_TODO_PATH:
        return await todo_ai_error_handler(request, InvalidInput("request body must be {\"input\": string}"))
    return await request_validation_exception_handler(request, exc)


@app.get("/todos")
def get_todos() -> list[Todo]:
    return get_all_todos()


@app.post("/todos")
def create_todo(todo_data: TodoCreate) -> Todo:
    todo_id = str(uuid.uuid4())
    return create_todo_db(
        todo_id,
        todo_data.title,
        todo_data.description,
        todo_data.due_date,
        todo_data.priority,
        todo_data.category,
    )


@app.patch("/todos/{todo_id}")
def update_todo(todo_id: str, todo_data: TodoUpdate) -> Todo:
    # description and due_date may be cleared; other fields ignore explicit nulls
    updates = {
        field: value
        for field, value in todo_data.model_dump(exclude_unset=True).items()
        if value is not None or field in ("description", "due_date")
    }
    result = update_todo_db(todo_id, **updates)
    if not result:
        raise HTTPException(status_code=404, detail="Todo not found")
    return result


@app.delete("/todos/{todo_id}")
def delete_todo(todo_id: str) -> dict:
    if not delete_todo_db(todo_id):
        raise HTTPException(status_code=404, detail="Todo not found")
    return {"status": "deleted"}


@app.post(PARSE_TODO_PATH)
async def parse_todo_endpoint(request: ParseTodoRequest) -> ExtractedTodo:
    """Convert a natural-language sentence into a structured todo. Nothing is saved."""
    return await parse_todo(request.input)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
