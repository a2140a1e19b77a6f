from .auth import (
    AccessTokenSchema,
    AuthResponseSchema,
    LoginSchema,
    PasswordChangeSchema,
    ProfileUpdateSchema,
    RefreshSchema,
    RegisterSchema,
    UserSchema,
)
from .common import PaginationMetaSchema, PaginationQuerySchema, UTCDateTime
from .task import (
    AdminTaskPageSchema,
    TaskCreateSchema,
    TaskListQuerySchema,
    TaskPageSchema,
    TaskSchema,
    TaskStatsSchema,
    TaskUpdateSchema,
)

__all__ = [
    "AccessTokenSchema",
    "AdminTaskPageSchema",
    "AuthResponseSchema",
    "LoginSchema",
    "PaginationMetaSchema",
    "PaginationQuerySchema",
    "PasswordChangeSchema",
    "ProfileUpdateSchema",
    "RefreshSchema",
    "RegisterSchema",
    "TaskCreateSchema",
    "TaskListQuerySchema",
    "TaskPageSchema",
    "TaskSchema",
    "TaskStatsSchema",
    "TaskUpdateSchema",
    "UTCDateTime",
    "UserSchema",
]
