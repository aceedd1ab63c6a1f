from .user import User
from .task import Task, TaskStatus, TaskPriority
from .knowledge import KnowledgeEntry, DifficultyLevel
from .notification import NotificationRecord, NotificationStatus, NotificationType
