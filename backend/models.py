from pydantic import BaseModel, Field
from typing import Any, Literal, Optional

Priority = Literal["high", "medium", "low"]
Category = Literal["work", "personal", "health", "study"]

PRIORITIES = ("high", "medium", "low")
CATEGORIES = ("work", "personal", "health", "study")
DEFAULT_PRIORITY = "medium"
DEFAULT_CATEGORY = "personal"


class ExtractedTodo(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    due_date: Optional[str] = None  # YYYY-MM-DD or YYYY-MM-DD HH:MM
    priority: Priority = DEFAULT_PRIORITY
    category: Category = DEFAULT_CATEGORY

class ParseTodoRequest(BaseModel):
    # Checked by the extractor so non-strings map to InvalidInput instead of a 422
    input: Any = None

class Todo(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    due_date: Optional[str] = None
    priority: Priority = DEFAULT_PRIORITY
    category: Category = DEFAULT_CATEGORY
    completed: bool = False
    created_at: str  # ISO format datetime string

class TodoCreate(BaseModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    due_date: Optional[str] = None
    priority: Priority = DEFAULT_PRIORITY
    category: Category = DEFAULT_CATEGORY

class TodoUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    due_date: Optional[str] = None
    priority: Optional[Priority] = None
    category: Optional[Category] = None
    completed: Optional[bool] = None
