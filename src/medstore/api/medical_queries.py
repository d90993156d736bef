"""FastAPI endpoints for medical queries sent to the pharmacy."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from medstore.account.user import User
from medstore.api.dependencies import optional_user, require_admin
from medstore.api.schemas import (
    MedicalQueryAnswerRequest,
    MedicalQueryListResponse,
    MedicalQueryResponse,
    MedicalQueryStatusRequest,
    MedicalQuerySubmittedResponse,
    MessageResponse,
    SubmitMedicalQueryRequest,
)
from medstore.medical_query.handling import RespondToMedicalQuery, UpdateMedicalQueryStatus
from medstore.medical_query.medical_query import MedicalQuery
from medstore.medical_query.submission import SubmitMedicalQuery
from medstore.shared.listing import paginate

medical_query_router = APIRouter(prefix="/medical-queries", tags=["medical-queries"])

QUERY_PAGE_SIZE = 10


@medical_query_router.post("", status_code=201, response_model=MedicalQuerySubmittedResponse)
async def submit_query(
    body: SubmitMedicalQueryRequest, user: User | None = Depends(optional_user)
) -> MedicalQuerySubmittedResponse:
    command = SubmitMedicalQuery(**body.model_dump(), user_id=user.id if user else None)
    query_id = current_domain.process(command, asynchronous=False)
    return MedicalQuerySubmittedResponse(message="Your query has been submitted.", query_id=query_id)


@medical_query_router.get("", response_model=MedicalQueryListResponse)
async def list_queries(
    status: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(QUERY_PAGE_SIZE, ge=1, le=100),
    admin: User = Depends(require_admin),
) -> MedicalQueryListResponse:
    queries = current_domain.repository_for(MedicalQuery).newest_first(status=status)
    result = paginate(queries, page, limit)
    return MedicalQueryListResponse(
        queries=[MedicalQueryResponse.from_query(q) for q in result["items"]],
        total=result["total"],
        page=result["page"],
        pages=result["pages"],
    )


@medical_query_router.get("/{query_id}", response_model=MedicalQueryResponse)
async def get_query(query_id: str, admin: User = Depends(require_admin)) -> MedicalQueryResponse:
    return MedicalQueryResponse.from_query(current_domain.repository_for(MedicalQuery).fetch(query_id))


@medical_query_router.put("/{query_id}/status", response_model=MedicalQueryResponse)
async def update_status(
    query_id: str, body: MedicalQueryStatusRequest, admin: User = Depends(require_admin)
) -> MedicalQueryResponse:
    current_domain.process(UpdateMedicalQueryStatus(query_id=query_id, status=body.status), asynchronous=False)
    return MedicalQueryResponse.from_query(current_domain.repository_for(MedicalQuery).fetch(query_id))


@medical_query_router.post("/{query_id}/response", response_model=MessageResponse)
async def respond(
    query_id: str, body: MedicalQueryAnswerRequest, admin: User = Depends(require_admin)
) -> MessageResponse:
    command = RespondToMedicalQuery(query_id=query_id, response=body.response, responded_by=admin.id)
    current_domain.process(command, asynchronous=False)
    return MessageResponse(message="Response sent successfully")
