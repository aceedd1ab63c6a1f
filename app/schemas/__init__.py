from .user import UserOut
from .task import TaskCreate, TaskUpdate, TaskStatusUpdate, TaskOut, TaskList, TaskCreated, TaskStatusChanged, TaskStats
from .knowledge import KnowledgeCreate, KnowledgeUpdate, KnowledgeOut, KnowledgeSearchResult, KnowledgeSearchResponse, KnowledgeList, KnowledgeCreated, ChatRequest, ChatSuggestion, ChatResponse
from .notification import NotificationRecordOut, NotificationLog, ReminderRunResult, ReminderSendResult
