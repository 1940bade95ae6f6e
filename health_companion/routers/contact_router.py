from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from typing import Optional
import logging

from ..application.ports.user_repo import UserDto
from ..application.services.contact_service import ContactService
from ..db.models.enums import ContactCategory, ContactPriority, ContactStatus
from ..dependencies import get_contact_service, get_optional_user, require_admin
from ..exceptions import ServerError
from ..schemas.common.common import ErrorResponse, MessageResponse
from ..schemas.contact.contact import (
    AssignRequest, ContactSubmitRequest, PriorityUpdateRequest, ReplyRequest, StatusUpdateRequest,
)
from ..utils import get_client_info

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/contact",
    tags=["Contact"],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)


@router.post("/submit", status_code=status.HTTP_201_CREATED)
def submit_message(
    body: ContactSubmitRequest,
    request: Request,
    current_user: Optional[UserDto] = Depends(get_optional_user),
    contacts: ContactService = Depends(get_contact_service),
):
    client = get_client_info(request)
    try:
        contact = contacts.submit(
            name=body.name,
            email=body.email,
            subject=body.subject,
            message=body.message,
            category=body.category.value,
            submitted_by=current_user.id if current_user else None,
            ip_address=client["ip_address"],
            user_agent=client["user_agent"],
            referrer=client["referer"],
        )
        return {
            "message": "Message submitted successfully. We will get back to you soon.",
            "contactId": contact.id,
            "priority": contact.priority,
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Contact submission error: {e}")
        raise ServerError("Server error while submitting message")


@router.get("/messages")
def list_messages(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[ContactStatus] = Query(None),
    priority: Optional[ContactPriority] = Query(None),
    category: Optional[ContactCategory] = Query(None),
    admin: UserDto = Depends(require_admin),
    contacts: ContactService = Depends(get_contact_service),
):
    try:
        items, pagination, statistics = contacts.list_messages(
            page=page,
            limit=limit,
            status=status.value if status else None,
            priority=priority.value if priority else None,
            category=category.value if category else None,
        )
        return {
            "contacts": [c.to_dict() for c in items],
            "pagination": pagination,
            "statistics": statistics,
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Get messages error: {e}")
        raise ServerError("Server error while fetching messages")


@router.get("/messages/{message_id}")
def get_message(
    message_id: str,
    admin: UserDto = Depends(require_admin),
    contacts: ContactService = Depends(get_contact_service),
):
    return {"contact": contacts.get(message_id).to_dict()}


@router.put("/messages/{message_id}/status")
def update_status(
    message_id: str,
    body: StatusUpdateRequest,
    admin: UserDto = Depends(require_admin),
    contacts: ContactService = Depends(get_contact_service),
):
    try:
        contact = contacts.set_status(message_id, body.status.value)
        return {"message": "Status updated successfully", "contact": contact.to_dict()}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Update status error: {e}")
        raise ServerError("Server error while updating status")


@router.put("/messages/{message_id}/priority")
def update_priority(
    message_id: str,
    body: PriorityUpdateRequest,
    admin: UserDto = Depends(require_admin),
    contacts: ContactService = Depends(get_contact_service),
):
    try:
        contact = contacts.set_priority(message_id, body.priority.value)
        return {"message": "Priority updated successfully", "contact": contact.to_dict()}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Update priority error: {e}")
        raise ServerError("Server error while updating priority")


@router.put("/messages/{message_id}/assign")
def assign_message(
    message_id: str,
    body: AssignRequest,
    admin: UserDto = Depends(require_admin),
    contacts: ContactService = Depends(get_contact_service),
):
    try:
        contact = contacts.assign(message_id, body.assignedTo)
        return {"message": "Message assigned successfully", "contact": contact.to_dict()}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Assign message error: {e}")
        raise ServerError("Server error while assigning message")


@router.put("/messages/{message_id}/reply")
def reply_message(
    message_id: str,
    body: ReplyRequest,
    admin: UserDto = Depends(require_admin),
    contacts: ContactService = Depends(get_contact_service),
):
    try:
        contact = contacts.reply(message_id, body.message, admin.id)
        return {"message": "Reply sent successfully", "contact": contact.to_dict()}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Reply message error: {e}")
        raise ServerError("Server error while sending reply")


@router.delete("/messages/{message_id}", response_model=MessageResponse)
def delete_message(
    message_id: str,
    admin: UserDto = Depends(require_admin),
    contacts: ContactService = Depends(get_contact_service),
):
    try:
        contacts.delete(message_id)
        return {"message": "Message deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Delete message error: {e}")
        raise ServerError("Server error while deleting message")


@router.get("/stats")
def contact_stats(
    period: str = Query("30d", pattern="^(7d|30d|90d|1y)$"),
    admin: UserDto = Depends(require_admin),
    contacts: ContactService = Depends(get_contact_service),
):
    try:
        return contacts.stats(period)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Get stats error: {e}")
        raise ServerError("Server error while fetching statistics")
