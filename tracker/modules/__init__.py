# Import every model so relationship strings resolve and metadata is complete
from tracker.modules.auth.model import User, UserRole
from tracker.modules.tasks.model import Task, TaskAssignment, TaskLink, TaskStatus, LinkType
from tracker.modules.comments.model import TaskComment
from tracker.modules.requests.model import AssignmentRequest, RequestStatus
from tracker.modules.notifications.model import Notification, NotificationType
from tracker.modules.docs.model import DocumentationSection, DocumentationPage
from tracker.modules.system.model import KeepAlive
