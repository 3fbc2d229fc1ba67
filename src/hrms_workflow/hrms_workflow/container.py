from __future__ import annotations

from dataclasses import dataclass

from .audit.mysql_audit_repository import MySQLAuditRepository
from .audit.service import AuditService
from .database.connection import DBConfig, DatabaseConnection
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.service import NotificationService
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.service import RequestService
from .requests.validators.factory import RequestValidatorFactory
from .users.mysql_employee_repository import MySQLEmployeeRepository
from .users.service import IdentityService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    requests_repo: MySQLRequestRepository
    notifications_repo: MySQLNotificationRepository
    audit_repo: MySQLAuditRepository

    identity_service: IdentityService
    notification_service: NotificationService
    audit_service: AuditService
    request_service: RequestService


def build_container(*, db_config: dict) -> Container:
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection.get_instance(config)

    employees_repo = MySQLEmployeeRepository(conn)
    requests_repo = MySQLRequestRepository(conn)
    notifications_repo = MySQLNotificationRepository(conn)
    audit_repo = MySQLAuditRepository(conn)

    identity_service = IdentityService(employees_repo)
    notification_service = NotificationService(notifications_repo, identity_service)
    audit_service = AuditService(audit_repo)
    request_service = RequestService(
        requests_repo,
        identity_service,
        notification_service,
        audit_service,
        validators=RequestValidatorFactory(),
    )

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        requests_repo=requests_repo,
        notifications_repo=notifications_repo,
        audit_repo=audit_repo,
        identity_service=identity_service,
        notification_service=notification_service,
        audit_service=audit_service,
        request_service=request_service,
    )
